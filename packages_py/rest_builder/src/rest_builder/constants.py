"""
Common header names and values.
"""

CONTENT_TYPE_KEY = "Content-Type"
ACCEPT_KEY = "Accept"

JSON = "application/JSON"
XML = "application/xml"
JSON_UTF8 = "application/json;charset=utf-8"
FORM_URLENCODED = "application/x-www-form-urlencoded"

NO_BODY = "No Body Provided"
NO_BASE_PATH = "No BasePath Provided"
