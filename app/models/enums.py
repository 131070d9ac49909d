from enum import Enum

class Role(str, Enum):
    owner = "owner"
    admin = "admin"
    member = "member"

    @property
    def rank(self) -> int:
        # owner > admin > member
        return _ROLE_RANK[self]

_ROLE_RANK = {Role.owner: 3, Role.admin: 2, Role.member: 1}

class TaskStatus(str, Enum):
    todo = "todo"
    doing = "doing"
    done = "done"
