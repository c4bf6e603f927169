"""Compose Smalltalk source from individual statements."""

from __future__ import annotations

from gtoolkit_installer.types import SshKeyPair

STATEMENT_SEPARATOR = ".\n"


def smalltalk_string(value: object) -> str:
    """Quote a value as a Smalltalk string literal.

    Embedded single quotes are doubled, so the value can never terminate the
    literal early.
    """
    text = str(value)
    if "\x00" in text:
        raise ValueError("Smalltalk strings cannot contain NUL characters")
    return "'" + text.replace("'", "''") + "'"


class SmalltalkExpressionBuilder:
    """Accumulate statements and join them into one executable expression."""

    def __init__(self) -> None:
        self._statements: list[str] = []

    def add(self, statement: str) -> SmalltalkExpressionBuilder:
        """Append a statement; a trailing period is dropped."""
        stripped = statement.strip()
        if stripped.endswith("."):
            stripped = stripped[:-1].rstrip()
        if stripped:
            self._statements.append(stripped)
        return self

    def build(self) -> str:
        """Return the statements as a single expression."""
        if not self._statements:
            return ""
        return STATEMENT_SEPARATOR.join(self._statements) + ".\n"


def ssh_credentials_expression(keys: SshKeyPair) -> str:
    """Build the expression configuring Iceberg to push with custom ssh keys."""
    return (
        SmalltalkExpressionBuilder()
        .add("IceCredentialsProvider useCustomSsh: true")
        .add(
            "IceCredentialsProvider sshCredentials"
            f" publicKey: {smalltalk_string(keys.public)};"
            f" privateKey: {smalltalk_string(keys.private)}"
        )
        .build()
    )


__all__ = [
    "STATEMENT_SEPARATOR",
    "SmalltalkExpressionBuilder",
    "smalltalk_string",
    "ssh_credentials_expression",
]
