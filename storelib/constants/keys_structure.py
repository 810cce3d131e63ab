# DynamoDB item keys for a stored document
documents_pk = '{storage_key}'
documents_sk = 'document'

document_attribute = 'document'
