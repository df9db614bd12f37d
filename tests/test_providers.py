"""
Tests for the catalog storage providers.
"""
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

from botocore.exceptions import ClientError

from shared.models import PlayerConfig, StorageProvider
from setup_tool.cloudflare_r2 import CloudflareR2Provider
from setup_tool.local_provider import LocalStorageProvider
from setup_tool.provider_factory import StorageProviderFactory
from setup_tool.s3_compatible import S3CompatibleProvider


class TestS3CompatibleProvider(unittest.TestCase):
    def setUp(self):
        patcher = patch('setup_tool.s3_compatible.boto3.client')
        self.mock_client_factory = patcher.start()
        self.addCleanup(patcher.stop)
        self.client = MagicMock()
        self.mock_client_factory.return_value = self.client

        self.provider = S3CompatibleProvider()
        self.assertTrue(self.provider.authenticate({
            'access_key_id': 'key',
            'secret_access_key': 'secret',
            'bucket': 'songs',
            'region': 'eu-west-1',
        }))

    def test_authenticate_builds_regional_client(self):
        _, kwargs = self.mock_client_factory.call_args
        self.assertEqual(kwargs['endpoint_url'], 'https://s3.eu-west-1.amazonaws.com')
        self.assertEqual(kwargs['region_name'], 'eu-west-1')
        self.client.head_bucket.assert_called_once_with(Bucket='songs')

    def test_authenticate_fails_on_missing_bucket(self):
        self.client.head_bucket.side_effect = ClientError(
            {'Error': {'Code': '404', 'Message': 'Not Found'}}, 'HeadBucket')
        self.assertFalse(S3CompatibleProvider().authenticate({
            'access_key_id': 'key', 'secret_access_key': 'secret', 'bucket': 'nope'}))

    def test_authenticate_requires_keys(self):
        self.assertFalse(S3CompatibleProvider().authenticate({'bucket': 'songs'}))

    def test_list_files_sorted_and_capped(self):
        modified = datetime(2024, 1, 1, tzinfo=timezone.utc)
        paginator = self.client.get_paginator.return_value
        paginator.paginate.return_value = [
            {'Contents': [{'Key': 'c.mp3', 'Size': 3, 'LastModified': modified},
                          {'Key': 'a.mp3', 'Size': 1, 'LastModified': modified}]},
            {'Contents': [{'Key': 'b.mp3', 'Size': 2}]},
        ]

        files = self.provider.list_files(limit=2)

        paginator.paginate.assert_called_once_with(
            Bucket='songs', Delimiter='/', PaginationConfig={'MaxItems': 2})
        self.assertEqual([f['key'] for f in files], ['a.mp3', 'b.mp3'])
        self.assertEqual(files[0]['modified'], modified.isoformat())
        self.assertIsNone(files[1]['modified'])

    def test_sub_folders_listed_as_directories(self):
        paginator = self.client.get_paginator.return_value
        paginator.paginate.return_value = [
            {'Contents': [{'Key': 'b.mp3', 'Size': 2}],
             'CommonPrefixes': [{'Prefix': 'albums/'}]},
        ]

        files = self.provider.list_files()

        self.assertEqual([f['key'] for f in files], ['albums/', 'b.mp3'])
        self.assertEqual(files[0]['size'], 0)

    def test_list_files_error_returns_empty(self):
        self.client.get_paginator.return_value.paginate.side_effect = ClientError(
            {'Error': {'Code': 'AccessDenied', 'Message': 'denied'}}, 'ListObjectsV2')
        self.assertEqual(self.provider.list_files(), [])

    def test_presigned_url(self):
        self.client.generate_presigned_url.return_value = 'https://signed'
        self.assertEqual(self.provider.get_file_url('a.mp3', 3600), 'https://signed')
        self.client.generate_presigned_url.assert_called_once_with(
            'get_object', Params={'Bucket': 'songs', 'Key': 'a.mp3'}, ExpiresIn=3600)

    def test_presigned_url_failure(self):
        self.client.generate_presigned_url.side_effect = ClientError(
            {'Error': {'Code': '500', 'Message': 'boom'}}, 'GetObject')
        self.assertEqual(self.provider.get_file_url('a.mp3'), '')


class TestCloudflareR2Provider(unittest.TestCase):
    @patch('setup_tool.s3_compatible.boto3.client')
    def test_endpoint_from_account_id(self, mock_client):
        provider = CloudflareR2Provider()
        self.assertTrue(provider.authenticate({
            'access_key_id': 'key', 'secret_access_key': 'secret',
            'bucket': 'songs', 'account_id': 'abc123'}))

        _, kwargs = mock_client.call_args
        self.assertEqual(kwargs['endpoint_url'], 'https://abc123.r2.cloudflarestorage.com')
        self.assertEqual(kwargs['region_name'], 'auto')

    def test_config_credentials_derive_account_id(self):
        config = PlayerConfig(provider=StorageProvider.CLOUDFLARE_R2,
                              endpoint='https://abc123.r2.cloudflarestorage.com',
                              access_key_id='key', secret_access_key='secret')
        self.assertEqual(config.credentials()['account_id'], 'abc123')


class TestLocalStorageProvider(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)
        bucket = self.root / 'songs'
        (bucket / 'albums').mkdir(parents=True)
        (bucket / 'b.mp3').write_bytes(b'bb')
        (bucket / 'a.mp3').write_bytes(b'a')

        self.provider = LocalStorageProvider()
        self.assertTrue(self.provider.authenticate({'base_path': self.tmp.name, 'bucket': 'songs'}))

    def tearDown(self):
        self.tmp.cleanup()

    def test_list_files(self):
        files = self.provider.list_files()
        self.assertEqual([f['key'] for f in files], ['a.mp3', 'albums/', 'b.mp3'])
        self.assertEqual(files[2]['size'], 2)

    def test_list_files_limit(self):
        self.assertEqual(len(self.provider.list_files(limit=1)), 1)

    def test_file_url(self):
        url = self.provider.get_file_url('a.mp3')
        self.assertTrue(url.startswith('file://'))
        self.assertTrue(url.endswith('/songs/a.mp3'))
        self.assertEqual(self.provider.get_file_url('missing.mp3'), '')

    def test_missing_bucket(self):
        self.assertFalse(LocalStorageProvider().authenticate({'base_path': self.tmp.name, 'bucket': 'nope'}))
        self.assertFalse(LocalStorageProvider().authenticate({'bucket': 'songs'}))


class TestStorageProviderFactory(unittest.TestCase):
    def test_create(self):
        self.assertIsInstance(StorageProviderFactory.create(StorageProvider.CLOUDFLARE_R2), CloudflareR2Provider)
        self.assertIsInstance(StorageProviderFactory.create(StorageProvider.GENERIC_S3), S3CompatibleProvider)
        self.assertIsInstance(StorageProviderFactory.create(StorageProvider.LOCAL), LocalStorageProvider)

    def test_connect_unconfigured(self):
        self.assertIsNone(StorageProviderFactory.connect(None))

    def test_connect_local(self):
        with tempfile.TemporaryDirectory() as tmp:
            config = PlayerConfig(provider=StorageProvider.LOCAL, bucket='.', endpoint=tmp)
            provider = StorageProviderFactory.connect(config)
            self.assertIsInstance(provider, LocalStorageProvider)
            self.assertEqual(provider.bucket_name, '.')

    def test_connect_failure(self):
        config = PlayerConfig(provider=StorageProvider.LOCAL, endpoint='/nonexistent/tunenoodle')
        self.assertIsNone(StorageProviderFactory.connect(config))

    def test_provider_names(self):
        self.assertEqual(StorageProviderFactory.get_provider_name(StorageProvider.BACKBLAZE_B2), 'Backblaze B2')


if __name__ == '__main__':
    unittest.main()
