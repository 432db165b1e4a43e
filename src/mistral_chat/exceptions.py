from typing import Optional


class MistralChatException(Exception):
    r"""Base class for all Mistral chat task exceptions.

    Attributes:
        message: A human-readable message describing the error.
    """

    message: str = "Internal error"

    def __init__(
        self,
        message: Optional[str] = None,
    ) -> None:
        r"""Initialize the `MistralChatException` with an optional message.

        If no message is provided, the default message is used.

        Args:
           message: A human-readable message describing the error.
        """
        if message:
            self.message = message
        super().__init__(self.message)


class InvalidConfigurationException(MistralChatException):
    r"""Exception raised when the task configuration is missing or cannot be resolved."""

    def __init__(self, message: str) -> None:
        r"""Initialize the `InvalidConfigurationException` with a message.

        Args:
           message: A human-readable message describing the error.
        """
        super().__init__(message)


class InvalidJsonSchemaException(MistralChatException):
    r"""Exception raised when the structured output schema is not valid JSON."""

    def __init__(self, message: str) -> None:
        r"""Initialize the `InvalidJsonSchemaException` with a message.

        Args:
           message: A human-readable message describing the error.
        """
        super().__init__(message)


class MistralAPIException(MistralChatException):
    r"""Exception raised when the Mistral API answers with an error status.

    Attributes:
        status_code: The HTTP status code of the response.
        body: The raw response body.
    """

    def __init__(self, status_code: int, body: str) -> None:
        r"""Initialize the `MistralAPIException` from the failed response.

        Args:
           status_code: The HTTP status code of the response.
           body: The raw response body.
        """
        self.status_code = status_code
        self.body = body
        super().__init__(f"Mistral API error: {body}")


class MistralConnectionException(MistralChatException):
    r"""Exception raised when the Mistral API cannot be reached."""

    def __init__(self, message: str) -> None:
        r"""Initialize the `MistralConnectionException` with a message.

        Args:
           message: A human-readable message describing the error.
        """
        super().__init__(message)


class ResponseExtractionException(MistralChatException):
    r"""Exception raised when a successful response does not have the expected shape.

    Attributes:
        raw: The raw response body.
    """

    def __init__(self, message: str, raw: str) -> None:
        r"""Initialize the `ResponseExtractionException` with a message and the raw body.

        Args:
           message: A human-readable message describing the error.
           raw: The raw response body.
        """
        self.raw = raw
        super().__init__(message)
