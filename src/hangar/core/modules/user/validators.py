from hangar.errors import ValidationError

MIN_PASSWORD_LENGTH = 8


def validate_credentials(username: str, password: str) -> None:
    """Validate a username/password pair for a login account.

    The password guards a session that can mint API keys, so it must be at
    least MIN_PASSWORD_LENGTH characters, free of whitespace and different
    from the username.
    """
    if not username or username != username.strip():
        raise ValidationError("Username must not be empty or padded with whitespace")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if any(char.isspace() for char in password):
        raise ValidationError("Password cannot contain whitespace characters")
    if password.casefold() == username.casefold():
        raise ValidationError("Password must differ from the username")
