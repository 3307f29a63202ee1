"""Exercise catalog definitions and the built-in exercise library."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ExerciseCategory(str, Enum):
    """Body-part category an exercise is filed under."""

    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    LEGS = "legs"
    CORE = "core"
    CARDIO = "cardio"
    OTHER = "other"


class EquipmentType(str, Enum):
    """Equipment used to perform an exercise."""

    BARBELL = "barbell"
    DUMBBELL = "dumbbell"
    CABLE = "cable"
    MACHINE = "machine"
    BODYWEIGHT = "bodyweight"
    KETTLEBELL = "kettlebell"
    OTHER = "other"


@dataclass
class Exercise:
    """A catalog entry, either built-in or user-defined."""

    name: str
    category: ExerciseCategory
    equipment: EquipmentType
    is_custom: bool = False
    created_at: datetime | None = None
    id: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "name": self.name,
            "category": self.category.value,
            "equipment": self.equipment.value,
            "is_custom": self.is_custom,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict, id: str | None = None) -> "Exercise":
        """Create from dictionary."""
        created_at = None
        if data.get("created_at"):
            created_at = datetime.fromisoformat(data["created_at"])

        return cls(
            id=id,
            name=data["name"],
            category=ExerciseCategory(data["category"]),
            equipment=EquipmentType(data["equipment"]),
            is_custom=bool(data.get("is_custom", False)),
            created_at=created_at,
        )


_C = ExerciseCategory
_E = EquipmentType

# Built-in library, seeded once into an empty database
SEED_EXERCISES: list[Exercise] = [
    # Chest
    Exercise("Barbell Bench Press", _C.CHEST, _E.BARBELL),
    Exercise("Incline Barbell Bench Press", _C.CHEST, _E.BARBELL),
    Exercise("Decline Barbell Bench Press", _C.CHEST, _E.BARBELL),
    Exercise("Dumbbell Bench Press", _C.CHEST, _E.DUMBBELL),
    Exercise("Incline Dumbbell Press", _C.CHEST, _E.DUMBBELL),
    Exercise("Decline Dumbbell Press", _C.CHEST, _E.DUMBBELL),
    Exercise("Dumbbell Fly", _C.CHEST, _E.DUMBBELL),
    Exercise("Incline Dumbbell Fly", _C.CHEST, _E.DUMBBELL),
    Exercise("Cable Fly", _C.CHEST, _E.CABLE),
    Exercise("Low Cable Fly", _C.CHEST, _E.CABLE),
    Exercise("Machine Chest Press", _C.CHEST, _E.MACHINE),
    Exercise("Pec Deck Machine", _C.CHEST, _E.MACHINE),
    Exercise("Push-ups", _C.CHEST, _E.BODYWEIGHT),
    Exercise("Dips (Chest Focus)", _C.CHEST, _E.BODYWEIGHT),
    # Back
    Exercise("Conventional Deadlift", _C.BACK, _E.BARBELL),
    Exercise("Sumo Deadlift", _C.BACK, _E.BARBELL),
    Exercise("Barbell Row", _C.BACK, _E.BARBELL),
    Exercise("Pendlay Row", _C.BACK, _E.BARBELL),
    Exercise("T-Bar Row", _C.BACK, _E.BARBELL),
    Exercise("Dumbbell Row", _C.BACK, _E.DUMBBELL),
    Exercise("Chest Supported Row", _C.BACK, _E.DUMBBELL),
    Exercise("Lat Pulldown", _C.BACK, _E.CABLE),
    Exercise("Close Grip Lat Pulldown", _C.BACK, _E.CABLE),
    Exercise("Seated Cable Row", _C.BACK, _E.CABLE),
    Exercise("Face Pull", _C.BACK, _E.CABLE),
    Exercise("Straight Arm Pulldown", _C.BACK, _E.CABLE),
    Exercise("Pull-ups", _C.BACK, _E.BODYWEIGHT),
    Exercise("Chin-ups", _C.BACK, _E.BODYWEIGHT),
    Exercise("Machine Row", _C.BACK, _E.MACHINE),
    Exercise("Kettlebell Swing", _C.BACK, _E.KETTLEBELL),
    # Shoulders
    Exercise("Overhead Press", _C.SHOULDERS, _E.BARBELL),
    Exercise("Push Press", _C.SHOULDERS, _E.BARBELL),
    Exercise("Behind the Neck Press", _C.SHOULDERS, _E.BARBELL),
    Exercise("Dumbbell Shoulder Press", _C.SHOULDERS, _E.DUMBBELL),
    Exercise("Arnold Press", _C.SHOULDERS, _E.DUMBBELL),
    Exercise("Lateral Raise", _C.SHOULDERS, _E.DUMBBELL),
    Exercise("Front Raise", _C.SHOULDERS, _E.DUMBBELL),
    Exercise("Rear Delt Fly", _C.SHOULDERS, _E.DUMBBELL),
    Exercise("Cable Lateral Raise", _C.SHOULDERS, _E.CABLE),
    Exercise("Cable Front Raise", _C.SHOULDERS, _E.CABLE),
    Exercise("Reverse Pec Deck", _C.SHOULDERS, _E.MACHINE),
    Exercise("Machine Shoulder Press", _C.SHOULDERS, _E.MACHINE),
    Exercise("Upright Row", _C.SHOULDERS, _E.BARBELL),
    Exercise("Kettlebell Press", _C.SHOULDERS, _E.KETTLEBELL),
    # Biceps
    Exercise("Barbell Curl", _C.BICEPS, _E.BARBELL),
    Exercise("EZ Bar Curl", _C.BICEPS, _E.BARBELL),
    Exercise("Preacher Curl", _C.BICEPS, _E.BARBELL),
    Exercise("Dumbbell Curl", _C.BICEPS, _E.DUMBBELL),
    Exercise("Hammer Curl", _C.BICEPS, _E.DUMBBELL),
    Exercise("Incline Dumbbell Curl", _C.BICEPS, _E.DUMBBELL),
    Exercise("Concentration Curl", _C.BICEPS, _E.DUMBBELL),
    Exercise("Cable Curl", _C.BICEPS, _E.CABLE),
    Exercise("Machine Preacher Curl", _C.BICEPS, _E.MACHINE),
    # Triceps
    Exercise("Close Grip Bench Press", _C.TRICEPS, _E.BARBELL),
    Exercise("Skull Crushers", _C.TRICEPS, _E.BARBELL),
    Exercise("Overhead Tricep Extension", _C.TRICEPS, _E.DUMBBELL),
    Exercise("Tricep Kickback", _C.TRICEPS, _E.DUMBBELL),
    Exercise("Tricep Pushdown", _C.TRICEPS, _E.CABLE),
    Exercise("Rope Pushdown", _C.TRICEPS, _E.CABLE),
    Exercise("Overhead Cable Extension", _C.TRICEPS, _E.CABLE),
    Exercise("Dips (Tricep Focus)", _C.TRICEPS, _E.BODYWEIGHT),
    Exercise("Diamond Push-ups", _C.TRICEPS, _E.BODYWEIGHT),
    Exercise("Tricep Dip Machine", _C.TRICEPS, _E.MACHINE),
    # Legs - quads
    Exercise("Barbell Back Squat", _C.LEGS, _E.BARBELL),
    Exercise("Barbell Front Squat", _C.LEGS, _E.BARBELL),
    Exercise("Hack Squat", _C.LEGS, _E.MACHINE),
    Exercise("Leg Press", _C.LEGS, _E.MACHINE),
    Exercise("Leg Extension", _C.LEGS, _E.MACHINE),
    Exercise("Goblet Squat", _C.LEGS, _E.DUMBBELL),
    Exercise("Dumbbell Lunges", _C.LEGS, _E.DUMBBELL),
    Exercise("Walking Lunges", _C.LEGS, _E.DUMBBELL),
    Exercise("Bulgarian Split Squat", _C.LEGS, _E.DUMBBELL),
    Exercise("Step Ups", _C.LEGS, _E.DUMBBELL),
    Exercise("Sissy Squat", _C.LEGS, _E.BODYWEIGHT),
    Exercise("Kettlebell Goblet Squat", _C.LEGS, _E.KETTLEBELL),
    # Legs - hamstrings / glutes
    Exercise("Romanian Deadlift", _C.LEGS, _E.BARBELL),
    Exercise("Stiff Leg Deadlift", _C.LEGS, _E.BARBELL),
    Exercise("Good Mornings", _C.LEGS, _E.BARBELL),
    Exercise("Dumbbell Romanian Deadlift", _C.LEGS, _E.DUMBBELL),
    Exercise("Lying Leg Curl", _C.LEGS, _E.MACHINE),
    Exercise("Seated Leg Curl", _C.LEGS, _E.MACHINE),
    Exercise("Hip Thrust", _C.LEGS, _E.BARBELL),
    Exercise("Glute Bridge", _C.LEGS, _E.BODYWEIGHT),
    Exercise("Cable Pull Through", _C.LEGS, _E.CABLE),
    # Legs - calves
    Exercise("Standing Calf Raise", _C.LEGS, _E.MACHINE),
    Exercise("Seated Calf Raise", _C.LEGS, _E.MACHINE),
    Exercise("Leg Press Calf Raise", _C.LEGS, _E.MACHINE),
    Exercise("Dumbbell Calf Raise", _C.LEGS, _E.DUMBBELL),
    # Core
    Exercise("Plank", _C.CORE, _E.BODYWEIGHT),
    Exercise("Side Plank", _C.CORE, _E.BODYWEIGHT),
    Exercise("Dead Bug", _C.CORE, _E.BODYWEIGHT),
    Exercise("Hanging Leg Raise", _C.CORE, _E.BODYWEIGHT),
    Exercise("Lying Leg Raise", _C.CORE, _E.BODYWEIGHT),
    Exercise("Ab Wheel Rollout", _C.CORE, _E.OTHER),
    Exercise("Cable Crunch", _C.CORE, _E.CABLE),
    Exercise("Cable Woodchop", _C.CORE, _E.CABLE),
    Exercise("Russian Twist", _C.CORE, _E.OTHER),
    Exercise("Decline Sit-ups", _C.CORE, _E.BODYWEIGHT),
    Exercise("Machine Crunch", _C.CORE, _E.MACHINE),
    # Cardio
    Exercise("Treadmill Running", _C.CARDIO, _E.MACHINE),
    Exercise("Treadmill Walking (Incline)", _C.CARDIO, _E.MACHINE),
    Exercise("Stationary Bike", _C.CARDIO, _E.MACHINE),
    Exercise("Rowing Machine", _C.CARDIO, _E.MACHINE),
    Exercise("Stair Climber", _C.CARDIO, _E.MACHINE),
    Exercise("Elliptical", _C.CARDIO, _E.MACHINE),
    # Other
    Exercise("Farmer's Carry", _C.OTHER, _E.DUMBBELL),
    Exercise("Turkish Get-up", _C.OTHER, _E.KETTLEBELL),
]
