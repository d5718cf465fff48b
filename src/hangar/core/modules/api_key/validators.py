from hangar.errors import ValidationError
from hangar.utils import is_api_key_name


def validate_api_key_name(name: str) -> None:
    """Validate API key name.

    Requirements:
    - 3 to 36 characters
    - Only letters, digits, underscores and hyphens

    Raises:
        ValidationError: If the name doesn't meet requirements
    """
    if not is_api_key_name(name):
        raise ValidationError("API key name must be 3-36 characters of letters, digits, '_' or '-'")
