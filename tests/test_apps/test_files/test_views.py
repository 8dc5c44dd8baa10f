"""Tests for the drive JSON endpoints."""

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import OperationalError

from server.apps.accounts.logic.token_operations import issue_token_pair
from server.apps.files.models import File, Folder


@pytest.fixture
def auth_headers(user):
    """Authorization header for the test user.

    Returns:
        Extra request kwargs carrying a Bearer access token.
    """
    tokens = issue_token_pair(user)
    return {'HTTP_AUTHORIZATION': f'Bearer {tokens.access_token}'}


@pytest.mark.django_db
def test_health(client):
    """Test health endpoint needs no token."""
    response = client.get('/api/health')

    assert response.status_code == 200
    assert response.json()['status'] == 'OK'


@pytest.mark.django_db
class TestAuthentication:
    """Tests for token checks on drive endpoints."""

    def test_missing_token(self, client):
        """Test requests without a token are rejected."""
        response = client.get('/api/files/')

        assert response.status_code == 401
        assert response.json() == {'message': 'No token provided'}

    def test_garbage_token(self, client):
        """Test a malformed token is rejected."""
        response = client.get(
            '/api/files/',
            HTTP_AUTHORIZATION='Bearer not-a-jwt',
        )

        assert response.status_code == 401

    def test_refresh_token_is_not_an_access_token(self, client, user):
        """Test refresh tokens can't authorize drive calls."""
        tokens = issue_token_pair(user)

        response = client.get(
            '/api/files/',
            HTTP_AUTHORIZATION=f'Bearer {tokens.refresh_token}',
        )

        assert response.status_code == 401


@pytest.mark.django_db
class TestListing:
    """Tests for the listing endpoint."""

    def test_root_listing(
        self,
        client,
        auth_headers,
        user,
        make_folder,
        make_file,
    ):
        """Test root listing shape."""
        folder = make_folder(user, 'Docs')
        file_instance = make_file(
            user,
            'report.pdf',
            content_type='application/pdf',
        )

        response = client.get('/api/files/', **auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert [item['id'] for item in body['folders']] == [folder.id]
        assert body['files'][0]['id'] == file_instance.id
        assert body['files'][0]['category'] == 'pdf'
        assert body['files'][0]['folderId'] is None

    @pytest.mark.parametrize('root_value', ['', 'null', 'undefined'])
    def test_root_aliases(
        self,
        client,
        auth_headers,
        user,
        make_file,
        root_value,
    ):
        """Test the client's placeholder values mean the root."""
        make_file(user, 'notes.txt')

        response = client.get(
            '/api/files/',
            {'folderId': root_value},
            **auth_headers,
        )

        assert response.status_code == 200
        assert len(response.json()['files']) == 1

    def test_pagination_params(self, client, auth_headers, user, make_file):
        """Test page and limit query parameters."""
        for index in range(3):
            make_file(user, f'file{index}.txt')

        response = client.get(
            '/api/files/',
            {'page': '2', 'limit': '2'},
            **auth_headers,
        )

        filenames = [item['filename'] for item in response.json()['files']]
        assert filenames == ['file0.txt']

    def test_filter_param(self, client, auth_headers, user, make_file):
        """Test fileTypeFilter query parameter."""
        make_file(user, 'cat.png', content_type='image/png')
        make_file(user, 'notes.txt')

        response = client.get(
            '/api/files/',
            {'fileTypeFilter': 'image'},
            **auth_headers,
        )

        filenames = [item['filename'] for item in response.json()['files']]
        assert filenames == ['cat.png']

    @pytest.mark.parametrize('params', [
        {'page': '0'},
        {'limit': 'abc'},
        {'folderId': 'abc'},
        {'fileTypeFilter': 'video'},
    ])
    def test_bad_params(self, client, auth_headers, params):
        """Test invalid query parameters answer 400."""
        response = client.get('/api/files/', params, **auth_headers)

        assert response.status_code == 400

    def test_unknown_folder(self, client, auth_headers):
        """Test a missing folder answers 404."""
        response = client.get(
            '/api/files/',
            {'folderId': '99999'},
            **auth_headers,
        )

        assert response.status_code == 404

    def test_database_failure(
        self,
        client,
        auth_headers,
        user,
        make_folder,
        monkeypatch,
    ):
        """Test a failing query answers 503."""
        make_folder(user, 'Docs')

        def broken_filter(*args, **kwargs):
            raise OperationalError('connection lost')

        monkeypatch.setattr(File.objects, 'filter', broken_filter)

        response = client.get(
            '/api/files/',
            {'fileTypeFilter': 'pdf'},
            **auth_headers,
        )

        assert response.status_code == 503

    def test_folder_lookup_failure(
        self,
        client,
        auth_headers,
        user,
        make_folder,
        monkeypatch,
    ):
        """Test a failing folder lookup answers 503 as JSON."""
        folder = make_folder(user, 'Docs')

        def broken_get(*args, **kwargs):
            raise OperationalError('connection lost')

        monkeypatch.setattr(Folder.objects, 'get', broken_get)

        response = client.get(
            '/api/files/',
            {'folderId': str(folder.id)},
            **auth_headers,
        )

        assert response.status_code == 503
        assert 'message' in response.json()


@pytest.mark.django_db
def test_recent(client, auth_headers, user, make_folder, make_file):
    """Test recent endpoint spans nested folders."""
    docs = make_folder(user, 'Docs')
    make_file(user, 'nested.txt', folder=docs)

    response = client.get('/api/files/recent', **auth_headers)

    assert response.status_code == 200
    assert response.json()['files'][0]['filename'] == 'nested.txt'


@pytest.mark.django_db
def test_search(client, auth_headers, user, make_folder, make_file):
    """Test search endpoint reports kind and folder path."""
    docs = make_folder(user, 'Docs')
    make_file(user, 'report.pdf', folder=docs)
    make_file(user, 'report_old.txt')

    response = client.get('/api/files/search', {'q': 'report'}, **auth_headers)

    assert response.status_code == 200
    results = response.json()['results']
    assert [(item['filename'], item['folderPath']) for item in results] == [
        ('report.pdf', 'Docs'),
        ('report_old.txt', 'Root'),
    ]
    assert {item['kind'] for item in results} == {'file'}


@pytest.mark.django_db
class TestUpload:
    """Tests for the upload endpoint."""

    def test_upload(self, client, auth_headers, user, mock_s3, make_folder):
        """Test multipart upload into a folder."""
        folder = make_folder(user, 'Docs')
        upload = SimpleUploadedFile(
            'report.pdf',
            b'%PDF-1.4',
            content_type='application/pdf',
        )

        response = client.post(
            '/api/files/upload',
            {'file': upload, 'folderId': str(folder.id)},
            **auth_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body['filename'] == 'report.pdf'
        assert body['folderId'] == folder.id
        assert body['size'] == len(b'%PDF-1.4')

    def test_upload_without_file(self, client, auth_headers):
        """Test missing file part answers 400."""
        response = client.post('/api/files/upload', {}, **auth_headers)

        assert response.status_code == 400
        assert response.json() == {'message': 'No file uploaded'}

    def test_upload_requires_post(self, client, auth_headers):
        """Test other methods are not allowed."""
        response = client.get('/api/files/upload', **auth_headers)

        assert response.status_code == 405


@pytest.mark.django_db
class TestFolders:
    """Tests for folder endpoints."""

    def test_create_folder(self, client, auth_headers, user):
        """Test folder creation from a JSON body."""
        response = client.post(
            '/api/files/folders',
            {'name': ' Docs '},
            content_type='application/json',
            **auth_headers,
        )

        assert response.status_code == 201
        assert response.json()['name'] == 'Docs'
        assert Folder.objects.filter(user=user, name='Docs').exists()

    def test_create_folder_blank_name(self, client, auth_headers):
        """Test blank folder name answers 400."""
        response = client.post(
            '/api/files/folders',
            {'name': '  '},
            content_type='application/json',
            **auth_headers,
        )

        assert response.status_code == 400

    def test_create_subfolder(self, client, auth_headers, user, make_folder):
        """Test parentId places the folder."""
        parent = make_folder(user, 'Docs')

        response = client.post(
            '/api/files/folders',
            {'name': 'Invoices', 'parentId': parent.id},
            content_type='application/json',
            **auth_headers,
        )

        assert response.status_code == 201
        assert response.json()['parentId'] == parent.id

    def test_get_and_delete_folder(
        self,
        client,
        auth_headers,
        user,
        make_folder,
    ):
        """Test folder detail and deletion."""
        folder = make_folder(user, 'Docs')
        url = f'/api/files/folders/{folder.id}'

        assert client.get(url, **auth_headers).json()['name'] == 'Docs'
        assert client.delete(url, **auth_headers).status_code == 200
        assert client.get(url, **auth_headers).status_code == 404

    def test_delete_non_empty_folder(
        self,
        client,
        auth_headers,
        user,
        make_folder,
        make_file,
    ):
        """Test deleting a folder with content answers 400."""
        folder = make_folder(user, 'Docs')
        make_file(user, 'notes.txt', folder=folder)

        response = client.delete(
            f'/api/files/folders/{folder.id}',
            **auth_headers,
        )

        assert response.status_code == 400
        assert Folder.objects.filter(id=folder.id).exists()

    def test_breadcrumbs(self, client, auth_headers, user, make_folder):
        """Test breadcrumbs run from the top folder down."""
        work = make_folder(user, 'Work')
        year = make_folder(user, '2024', parent=work)

        response = client.get(
            f'/api/files/folders/{year.id}/breadcrumbs',
            **auth_headers,
        )

        names = [item['name'] for item in response.json()['breadcrumbs']]
        assert names == ['Work', '2024']

    def test_size(self, client, auth_headers, user, make_folder, make_file):
        """Test folder size sums direct files."""
        folder = make_folder(user, 'Docs')
        make_file(user, 'a.txt', folder=folder, size_bytes=10)
        make_file(user, 'b.txt', folder=folder, size_bytes=32)

        response = client.get(
            f'/api/files/folders/{folder.id}/size',
            **auth_headers,
        )

        assert response.json() == {'folderId': folder.id, 'size': 42}

    def test_other_users_folder(
        self,
        client,
        auth_headers,
        other_user,
        make_folder,
    ):
        """Test another user's folder answers 404."""
        folder = make_folder(other_user, 'Private')

        response = client.get(
            f'/api/files/folders/{folder.id}',
            **auth_headers,
        )

        assert response.status_code == 404


@pytest.mark.django_db
class TestFileEndpoints:
    """Tests for file detail, deletion and export."""

    def test_file_detail_and_delete(
        self,
        client,
        auth_headers,
        user,
        make_file,
    ):
        """Test file detail and deletion."""
        file_instance = make_file(user, 'notes.txt')
        url = f'/api/files/{file_instance.id}'

        assert client.get(url, **auth_headers).json()['filename'] == 'notes.txt'
        assert client.delete(url, **auth_headers).status_code == 200
        assert not File.objects.filter(id=file_instance.id).exists()

    def test_export(self, client, auth_headers, user, make_file):
        """Test export returns a presigned link and the filename."""
        file_instance = make_file(user, 'notes.txt')

        response = client.get(
            f'/api/files/export/{file_instance.id}',
            **auth_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body['filename'] == 'notes.txt'
        assert 'X-Amz-Signature' in body['url']

    def test_export_other_users_file(
        self,
        client,
        auth_headers,
        other_user,
        make_file,
    ):
        """Test another user's file can't be exported."""
        file_instance = make_file(other_user, 'secret.txt')

        response = client.get(
            f'/api/files/export/{file_instance.id}',
            **auth_headers,
        )

        assert response.status_code == 404
