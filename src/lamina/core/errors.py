"""Exception hierarchy for the Lamina Generator.

Remote failures carry a message that is shown to the user verbatim, so the
messages raised here are written for end users rather than for logs.
"""


class LaminaError(Exception):
    """Base class for all Lamina errors."""


class RemoteServiceError(LaminaError):
    """A call to the remote image service did not produce a usable result."""


class GenerationFailedError(RemoteServiceError):
    """Text-to-image generation returned no images."""


class EditFailedError(RemoteServiceError):
    """An image edit response contained no image part."""


class DirectiveGenerationFailedError(RemoteServiceError):
    """The text model could not produce an improvement directive."""


class StorageDecodeError(LaminaError):
    """The persisted saved-image collection could not be decoded."""


class MissingCredentialError(LaminaError):
    """No API key is configured for the remote image service."""


class FlowBusyError(LaminaError):
    """A generate or improve flow was triggered while another one is running."""
