"""
Начальный общий каталог упражнений и системные программы.
Системные программы ссылаются на упражнения по названию.
"""

INITIAL_EXERCISES = [
    {"name": "Bench Press", "muscle_group": "Chest", "note": "Barbell flat bench press"},
    {"name": "Incline Dumbbell Press", "muscle_group": "Chest", "note": "Incline bench, dumbbells"},
    {"name": "Deadlift", "muscle_group": "Back", "note": "Conventional barbell deadlift"},
    {"name": "Barbell Squat", "muscle_group": "Legs", "note": "Back squat with barbell"},
    {"name": "Pull Up", "muscle_group": "Back", "note": "Bodyweight pull-up"},
    {"name": "Bicep Curl", "muscle_group": "Arms", "note": "Standing dumbbell biceps curl"},
    {"name": "Tricep Pushdown", "muscle_group": "Arms", "note": "Cable machine pushdown"},
    {"name": "Shoulder Press", "muscle_group": "Shoulders", "note": "Seated dumbbell shoulder press"},
    {"name": "Lat Pulldown", "muscle_group": "Back", "note": "Cable lat pulldown"},
    {"name": "Leg Press", "muscle_group": "Legs", "note": "Machine leg press"},
]

SYSTEM_ROUTINES = [
    {
        "name": "Push",
        "description": "Грудь, плечи, трицепс",
        "exercises": ["Bench Press", "Incline Dumbbell Press", "Shoulder Press", "Tricep Pushdown"],
    },
    {
        "name": "Pull",
        "description": "Спина и бицепс",
        "exercises": ["Deadlift", "Pull Up", "Lat Pulldown", "Bicep Curl"],
    },
    {
        "name": "Legs",
        "description": "Ноги",
        "exercises": ["Barbell Squat", "Leg Press"],
    },
]
