import os

import boto3
from botocore.config import Config

aws_config_ddb = Config(retries={'max_attempts': 30}, region_name=os.environ.get('AWS_REGION', 'eu-central-1'))


def get_dynamodb_client():
    # DynamoDB Client.
    # Local DynamoDB is used when ENDPOINT_URL is set.
    if os.environ.get('ENDPOINT_URL'):
        return boto3.client('dynamodb', endpoint_url=os.environ.get('ENDPOINT_URL'), config=aws_config_ddb)
    return boto3.client('dynamodb', config=aws_config_ddb)
