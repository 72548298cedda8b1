"""IdP Config Utility.

Validation and persistence marshalling for identity provider token issuance
configuration and identity repository attribute policy.
"""

__version__ = "0.1.0"
