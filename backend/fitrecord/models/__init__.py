from fitrecord.models.client import Client
from fitrecord.models.exercise import Exercise, MuscleGroup
from fitrecord.models.workout_session import WorkoutSession, WorkoutSessionClient
from fitrecord.models.workout_exercise import WorkoutExercise
from fitrecord.models.exercise_set import ExerciseSet

__all__ = [
    "Client",
    "Exercise",
    "MuscleGroup",
    "WorkoutSession",
    "WorkoutSessionClient",
    "WorkoutExercise",
    "ExerciseSet",
]
