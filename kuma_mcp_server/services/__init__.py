"""Service layer: monitor operations, field projection and result wrapping.

Import concrete services from their modules; ``api_client`` depends on
``services.models``, so this package must not import it eagerly.
"""
