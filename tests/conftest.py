import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient

from catalog_api.config import Settings
from catalog_api.main import create_app


def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        DATABASE_URL=f"sqlite:///{tmp_path / 'catalog.db'}",
        AWS_REGION="ap-southeast-2",
        AWS_ACCESS_KEY="testing",
        AWS_SECRET_ACCESS_KEY="testing",
        S3_BUCKET_NAME="test-bucket",
        S3_ENDPOINT="",
        ALLOWED_UPLOAD_EXTENSIONS="jpg,jpeg,png,webp,gif",
        VERIFY_UPLOADS=False,
        LOG_LEVEL="WARNING",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeS3:
    """Just enough of a boto3 S3 client for the issuer."""

    def __init__(self, keys=(), fail_with=None):
        self.keys = set(keys)
        self.fail_with = fail_with
        self.closed = False

    def generate_presigned_url(self, ClientMethod, Params, ExpiresIn, HttpMethod):
        if self.fail_with is not None:
            raise self.fail_with
        return f"https://storage.test/{Params['Bucket']}/{Params['Key']}?expires={ExpiresIn}"

    def head_object(self, Bucket, Key):
        if self.fail_with is not None:
            raise self.fail_with
        if Key not in self.keys:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadObject")
        return {"ContentLength": 1}

    def close(self):
        self.closed = True


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def chair():
    return {
        "name": "Chair",
        "description": "Wooden chair",
        "price": 49.99,
        "filename": "abc123.jpg",
    }
