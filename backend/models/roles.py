import enum
import uuid
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict


class Wing(str, enum.Enum):
    male = "male"
    female = "female"


class UserRole(str, enum.Enum):
    student = "student"
    warden_male = "wardenMale"
    warden_female = "wardenFemale"
    staff = "staff"              # not tied to a wing
    staff_male = "staffMale"
    staff_female = "staffFemale"


class Student(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["student"] = "student"


class Warden(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["warden"] = "warden"
    wing: Wing


class Staff(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["staff"] = "staff"
    wing: Optional[Wing] = None


Role = Union[Student, Warden, Staff]

_ROLE_VARIANTS = {
    UserRole.student: Student(),
    UserRole.warden_male: Warden(wing=Wing.male),
    UserRole.warden_female: Warden(wing=Wing.female),
    UserRole.staff: Staff(),
    UserRole.staff_male: Staff(wing=Wing.male),
    UserRole.staff_female: Staff(wing=Wing.female),
}


def role_from_user_role(user_role: UserRole) -> Role:
    """Interpret a stored role value. Unknown strings raise ValueError."""
    return _ROLE_VARIANTS[UserRole(user_role)]


def staff_role_for_wing(wing: Optional[Wing]) -> UserRole:
    if wing == Wing.male:
        return UserRole.staff_male
    if wing == Wing.female:
        return UserRole.staff_female
    return UserRole.staff


def role_wing(role: Role) -> Optional[Wing]:
    """The wing a warden/staff role is scoped to, None for students and unscoped staff."""
    if isinstance(role, (Warden, Staff)):
        return role.wing
    return None


class Actor(BaseModel):
    """The caller of a core operation: who they are and what they may do."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    name: str = ""
    role: Role
    hostel: Optional[str] = None
    room: Optional[str] = None
    hostel_gender: Optional[Wing] = None

    @property
    def is_student(self) -> bool:
        return isinstance(self.role, Student)

    @property
    def is_warden(self) -> bool:
        return isinstance(self.role, Warden)

    @property
    def is_staff(self) -> bool:
        return isinstance(self.role, Staff)

    @classmethod
    def from_user(cls, user) -> "Actor":
        return cls(
            id=user.id,
            name=user.name,
            role=role_from_user_role(user.role),
            hostel=user.hostel,
            room=user.room,
            hostel_gender=user.hostel_gender,
        )
