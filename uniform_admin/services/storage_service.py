"""Item photos in the S3 bucket, served from the public CDN URL."""
import uuid

import boto3
from botocore.config import Config as BotoConfig
from flask import current_app

ITEM_PREFIX = "items/"
CACHE_CONTROL = "public, max-age=31536000, immutable"


def _s3():
    cfg = current_app.config
    return boto3.client(
        "s3",
        endpoint_url=cfg["S3_ENDPOINT_URL"] or None,
        aws_access_key_id=cfg["S3_ACCESS_KEY"],
        aws_secret_access_key=cfg["S3_SECRET_KEY"],
        region_name=cfg["S3_REGION"],
        config=BotoConfig(signature_version="s3v4", retries={"max_attempts": 3}),
    )


def _cdn_base():
    return current_app.config["S3_PUBLIC_URL"].rstrip("/")


def new_item_key():
    # Keys are never reused, so objects can be cached forever
    return f"{ITEM_PREFIX}{uuid.uuid4().hex}.jpg"


def put_item_image(key, jpeg):
    """Store a JPEG publicly and return its CDN URL."""
    _s3().put_object(
        Bucket=current_app.config["S3_BUCKET_NAME"],
        Key=key,
        Body=jpeg,
        ContentType="image/jpeg",
        CacheControl=CACHE_CONTROL,
        ACL="public-read",
    )
    return public_url(key)


def public_url(key):
    return f"{_cdn_base()}/{key}"


def key_from_public_url(url):
    """Inverse of public_url; None for anything outside our item folder."""
    base = _cdn_base()
    if not base or not url or not url.startswith(f"{base}/{ITEM_PREFIX}"):
        return None
    return url[len(base) + 1:]


def remove(key):
    _s3().delete_object(Bucket=current_app.config["S3_BUCKET_NAME"], Key=key)
