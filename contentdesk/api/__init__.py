"""HTTP access to the remote content service.

``client`` holds the injected :class:`~contentdesk.api.client.ContentClient`;
``schemas`` holds the pydantic models for the service's JSON payloads.
"""
