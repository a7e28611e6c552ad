from dataclasses import dataclass


@dataclass(frozen=True)
class AuthorDTO:
    name: str = ""
    url: str = ""
