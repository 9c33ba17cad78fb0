import json
from typing import Any, Optional
from urllib.parse import quote
import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import PostgresDsn

logger = logging.getLogger(__name__)


def connect_to_secrets_manager(region: str):
    if not region:
        raise ValueError("AWS_REGION_NAME is not set")

    session = boto3.session.Session()
    client = session.client(
        service_name='secretsmanager',
        region_name=region
    )
    return client


def connect_to_s3(region: Optional[str]):
    session = boto3.session.Session()
    return session.client(service_name='s3', region_name=region)


def get_secret_string_from_secret_manager(region_name, secret_id) -> Any:
    client = connect_to_secrets_manager(region_name)
    # For a list of exceptions thrown, see
    # https://docs.aws.amazon.com/secretsmanager/latest/apireference/API_GetSecretValue.html
    get_secret_value_response = client.get_secret_value(SecretId=secret_id)

    secret_json = json.loads(get_secret_value_response["SecretString"])
    if not secret_json:
        raise ValueError(f"Cannot get {secret_id} values from AWS secret manager")
    return secret_json


def get_database_url_from_secret_manager(region_name, secret_creds_id, secret_params_id) -> PostgresDsn:
    secret_json = get_secret_string_from_secret_manager(region_name, secret_creds_id)
    if secret_params_id:
        secret_params_json = get_secret_string_from_secret_manager(region_name, secret_params_id)
        if secret_params_json:
            secret_json.update(secret_params_json)

    url_encoded_password = quote(secret_json["password"])

    return PostgresDsn.build(
        scheme="postgresql",
        username=secret_json["username"],
        port=secret_json["port"],
        password=url_encoded_password,
        host=secret_json["host"],
        path=f"{secret_json['dbname']}",
    )


def upload_file_to_s3(local_path: str, *, bucket: str, key: str, region: Optional[str],
                      content_type: Optional[str] = None) -> None:
    client = connect_to_s3(region)
    extra_args = {"ContentType": content_type} if content_type else None
    try:
        client.upload_file(local_path, bucket, key, ExtraArgs=extra_args)
    except (BotoCoreError, ClientError) as e:
        logger.error(f'Failed to upload "{key}" to bucket "{bucket}": {e}')
        raise
    logger.info(f'Uploaded "{key}" to bucket "{bucket}"')


def delete_file_from_s3(*, bucket: str, key: str, region: Optional[str]) -> None:
    client = connect_to_s3(region)
    try:
        client.delete_object(Bucket=bucket, Key=key)
    except (BotoCoreError, ClientError) as e:
        logger.error(f'Failed to delete "{key}" from bucket "{bucket}": {e}')
        raise
    logger.info(f'Deleted "{key}" from bucket "{bucket}"')
