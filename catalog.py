# catalog.py
"""
Static exercise rosters for FitPlan.

build_exercises(focus, intensity) returns the ordered exercise list for a
workout day. Each exercise is a dict with:
  name, sets, reps, rest_time, tip

Sets, reps and rest come from the intensity table, except for circuit
work (fixed high-rep ranges, short rest) and timed holds.
"""

INTENSITY_PARAMS = {
    "High": {"sets": 4, "reps": "8-12", "rest_time": "90 seconds"},
    "Medium": {"sets": 3, "reps": "10-15", "rest_time": "60 seconds"},
    "Low": {"sets": 2, "reps": "12-20", "rest_time": "45 seconds"},
}

CIRCUIT_FOCI = ("Cardio & Strength",)
CIRCUIT_REST = "30 seconds"


def _params(intensity):
    return INTENSITY_PARAMS.get(intensity, INTENSITY_PARAMS["Low"])


def _exercise(name, sets, reps, rest_time, tip):
    return {
        "name": name,
        "sets": sets,
        "reps": reps,
        "rest_time": rest_time,
        "tip": tip,
    }


def _from_roster(roster, params):
    # roster rows: (name, is_accessory, tip)
    sets = params["sets"]
    return [
        _exercise(
            name,
            sets - 1 if accessory else sets,
            params["reps"],
            params["rest_time"],
            tip,
        )
        for name, accessory, tip in roster
    ]


UPPER_BODY = [
    ("Push-ups", False, "Keep core tight, full range of motion"),
    ("Pull-ups or Rows", False, "Pull shoulder blades together"),
    ("Shoulder Press", False, "Control the weight, don't arch back"),
    ("Bicep Curls", True, "Keep elbows stationary"),
    ("Tricep Dips", True, "Go slow on the negative"),
]

LOWER_BODY = [
    ("Squats", False, "Knees track over toes, go below parallel"),
    ("Lunges", False, "Keep front knee over ankle"),
    ("Romanian Deadlifts", False, "Hinge at hips, keep back straight"),
    ("Calf Raises", True, "Full range of motion at top"),
    ("Leg Raises", True, "Control the movement"),
]

PUSH = [
    ("Bench Press / Push-ups", False, "Full range of motion"),
    ("Overhead Press", False, "Core engaged"),
    ("Dips", False, "Keep elbows close to body"),
    ("Tricep Extensions", True, "Control the weight"),
]

PULL = [
    ("Pull-ups / Rows", False, "Pull to chest"),
    ("Lat Pulldowns", False, "Wide grip for lats"),
    ("Bicep Curls", False, "Full extension"),
    ("Face Pulls", True, "Focus on rear delts"),
]

LEGS = [
    ("Squats", False, "Deep squats for full activation"),
    ("Deadlifts", False, "Keep back neutral"),
    ("Lunges", False, "Step forward, not out"),
    ("Leg Curls", True, "Control the negative"),
    ("Calf Raises", True, "Full stretch and contraction"),
]

ROSTERS = {
    "Upper Body": UPPER_BODY,
    "Lower Body": LOWER_BODY,
    "Push": PUSH,
    "Pull": PULL,
    "Legs": LEGS,
}

# (name, is_accessory, reps, tip)
CIRCUIT = [
    ("Circuit: Squats", False, "15-20", "High intensity"),
    ("Circuit: Push-ups", False, "12-15", "Full body engagement"),
    ("Circuit: Burpees", False, "10-12", "Explosive movement"),
    ("Circuit: Mountain Climbers", False, "20-30", "Fast pace"),
    ("Circuit: Jumping Lunges", True, "12-15 per leg", "Land softly"),
]


def _build_circuit(params):
    sets = params["sets"]
    return [
        _exercise(name, sets - 1 if accessory else sets, reps, CIRCUIT_REST, tip)
        for name, accessory, reps, tip in CIRCUIT
    ]


def _build_full_body(params):
    sets = params["sets"]
    reps = params["reps"]
    rest = params["rest_time"]
    return [
        _exercise("Squats", sets, reps, rest, "Foundation movement"),
        _exercise("Push-ups", sets, reps, rest, "Core engaged"),
        _exercise("Rows / Pull-ups", sets, reps, rest, "Balance push/pull"),
        # timed hold, independent of intensity
        _exercise("Plank", 1, "30-60 seconds", "60 seconds", "Hold perfect form"),
        _exercise("Lunges", sets - 1, reps, rest, "Unilateral strength"),
    ]


def build_exercises(focus, intensity):
    params = _params(intensity)

    if focus in CIRCUIT_FOCI:
        return _build_circuit(params)
    if focus in ROSTERS:
        return _from_roster(ROSTERS[focus], params)

    # Full Body, Full Body Maintenance, General Fitness
    return _build_full_body(params)
