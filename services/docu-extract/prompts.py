"""Base prompts for each output format.

The user's optional instructions are appended after these by the request
builder, never prepended.
"""

SUMMARY_PROMPT = (
    "Summarize the key information from the following document content. "
    "Provide a concise and comprehensive overview."
)

JSON_EXTRACT_PROMPT = (
    "Analyze the following document content and extract structured information "
    "as a JSON object. Identify meaningful fields and values. If the document "
    "appears to be a form, invoice, or has a clear tabular structure, try to "
    "replicate that. For unstructured text, identify key entities, topics, and "
    "their relevant details. Ensure the output is a valid JSON object."
)

KEY_VALUE_PAIRS_PROMPT = """Extract the most important key-value pairs from the following document content. List them clearly, for example:
Key1: Value1
Key2: Value2"""

ADDITIONAL_INSTRUCTIONS_PREFIX = "Additionally, consider the following: "

DOCUMENT_CONTENT_LABEL = "Document Content:"
