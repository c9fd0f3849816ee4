from dataclasses import asdict, dataclass


@dataclass
class UserDTO:
    id: int
    username: str
    role: str
    is_admin: bool = False

    def to_dict(self) -> dict:
        return asdict(self)
