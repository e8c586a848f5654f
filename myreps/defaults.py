USER_GOALS = ["Muscle Gain", "Weight Loss", "Improve Endurance", "General Fitness"]

DIFFICULTY_LEVELS = ["Beginner", "Intermediate", "Advanced"]

DIFFICULTY_RATINGS = ["Easy", "Fair", "Hard"]

DEFAULT_REST_SECONDS = 180

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"

GEMINI_SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
]


DEFAULT_EXERCISES = [
    {
        "id": "barbell-bench-press",
        "name": "Barbell Bench Press",
        "muscle_group": "Chest",
        "muscles": "Pectoralis major, anterior deltoid, triceps",
        "equipment": "Barbell, Bench",
        "difficulty": "Intermediate",
        "is_core": True,
        "description": "The classic horizontal press for chest strength.",
        "instructions": "Lie on the bench with eyes under the bar. Grip slightly wider than shoulders, lower the bar to mid-chest with elbows at about 45 degrees, then press back up until the arms are straight.",
    },
    {
        "id": "incline-dumbbell-press",
        "name": "Incline Dumbbell Press",
        "muscle_group": "Chest",
        "muscles": "Upper pectoralis, anterior deltoid",
        "equipment": "Dumbbells, Bench",
        "difficulty": "Intermediate",
        "is_core": False,
        "description": "Press on a 30 degree incline to bias the upper chest.",
        "instructions": "Set the bench to 30 degrees. Start with the dumbbells over the shoulders, lower them to the sides of the chest, then press up and slightly in.",
    },
    {
        "id": "push-up",
        "name": "Push-up",
        "muscle_group": "Pecho",
        "muscles": "Pectoralis major, triceps, core",
        "equipment": "Bodyweight",
        "difficulty": "Beginner",
        "is_core": True,
        "description": "Bodyweight press that also trains the trunk.",
        "instructions": "Hands under shoulders, body in a straight line. Lower the chest toward the floor with elbows at 45 degrees, then press back to plank without hips sagging.",
    },
    {
        "id": "cable-fly",
        "name": "Cable Fly",
        "muscle_group": "Pectorales",
        "muscles": "Pectoralis major",
        "equipment": "Cable",
        "difficulty": "Beginner",
        "is_core": False,
        "description": "Isolation fly with constant cable tension.",
        "instructions": "Stand between the pulleys with a slight forward lean. Keep a soft bend in the elbows and bring the handles together in front of the chest, then open back under control.",
    },
    {
        "id": "pull-up",
        "name": "Pull-up",
        "muscle_group": "Back",
        "muscles": "Latissimus dorsi, biceps, rear deltoid",
        "equipment": "Pull-up Bar",
        "difficulty": "Intermediate",
        "is_core": True,
        "description": "Vertical pull for lat width and grip.",
        "instructions": "Hang with an overhand grip just outside the shoulders. Pull the chest toward the bar by driving the elbows down, then lower to a full hang.",
    },
    {
        "id": "barbell-row",
        "name": "Barbell Row",
        "muscle_group": "Espalda",
        "muscles": "Latissimus dorsi, rhomboids, trapezius",
        "equipment": "Barbell",
        "difficulty": "Intermediate",
        "is_core": True,
        "description": "Horizontal pull for a thick upper back.",
        "instructions": "Hinge until the torso is close to parallel. Row the bar to the lower ribs, squeeze the shoulder blades, then lower with control.",
    },
    {
        "id": "lat-pulldown",
        "name": "Lat Pulldown",
        "muscle_group": "Lats",
        "muscles": "Latissimus dorsi, teres major",
        "equipment": "Cable, Machine",
        "difficulty": "Beginner",
        "is_core": False,
        "description": "Machine alternative to the pull-up.",
        "instructions": "Sit with thighs under the pads. Pull the bar to the upper chest while keeping the torso tall, then let it rise until the arms are straight.",
    },
    {
        "id": "seated-cable-row",
        "name": "Seated Cable Row",
        "muscle_group": "Back",
        "muscles": "Rhomboids, middle trapezius, lats",
        "equipment": "Cable",
        "difficulty": "Beginner",
        "is_core": False,
        "description": "Controlled horizontal pull on the cable station.",
        "instructions": "Sit tall with a slight knee bend. Pull the handle to the stomach, pause with the shoulder blades squeezed, then return without rounding.",
    },
    {
        "id": "overhead-press",
        "name": "Overhead Press",
        "muscle_group": "Shoulders",
        "muscles": "Anterior deltoid, lateral deltoid, triceps",
        "equipment": "Barbell",
        "difficulty": "Intermediate",
        "is_core": True,
        "description": "Standing vertical press for shoulder strength.",
        "instructions": "Start with the bar on the front of the shoulders. Brace, press the bar overhead moving the head back out of the path, then lower to the start.",
    },
    {
        "id": "lateral-raise",
        "name": "Lateral Raise",
        "muscle_group": "Hombros",
        "muscles": "Lateral deltoid",
        "equipment": "Dumbbells",
        "difficulty": "Beginner",
        "is_core": False,
        "description": "Isolation for the side delts.",
        "instructions": "Hold the dumbbells at your sides. Raise them out to shoulder height leading with the elbows, then lower slowly.",
    },
    {
        "id": "face-pull",
        "name": "Face Pull",
        "muscle_group": "Deltoides",
        "muscles": "Rear deltoid, external rotators",
        "equipment": "Cable",
        "difficulty": "Beginner",
        "is_core": False,
        "description": "Rear delt and rotator cuff work on the cable.",
        "instructions": "Set a rope at face height. Pull toward the forehead splitting the rope, finishing with the hands beside the ears.",
    },
    {
        "id": "triceps-pushdown",
        "name": "Triceps Pushdown",
        "muscle_group": "Tríceps",
        "muscles": "Triceps brachii",
        "equipment": "Cable",
        "difficulty": "Beginner",
        "is_core": False,
        "description": "Cable isolation for the triceps.",
        "instructions": "Keep the elbows pinned to the sides. Push the bar down until the arms are straight, then let it rise to about 90 degrees.",
    },
    {
        "id": "close-grip-bench-press",
        "name": "Close-grip Bench Press",
        "muscle_group": "Triceps",
        "muscles": "Triceps brachii, pectoralis major",
        "equipment": "Barbell, Bench",
        "difficulty": "Advanced",
        "is_core": False,
        "description": "Bench press variation that loads the triceps.",
        "instructions": "Grip the bar at shoulder width. Lower to the lower chest keeping the elbows tucked, then press to lockout.",
    },
    {
        "id": "barbell-curl",
        "name": "Barbell Curl",
        "muscle_group": "Biceps",
        "muscles": "Biceps brachii, brachialis",
        "equipment": "Barbell",
        "difficulty": "Beginner",
        "is_core": False,
        "description": "Standard curl for arm size.",
        "instructions": "Stand tall with an underhand grip. Curl the bar to the shoulders without swinging, then lower under control.",
    },
    {
        "id": "hammer-curl",
        "name": "Hammer Curl",
        "muscle_group": "Bíceps",
        "muscles": "Brachioradialis, brachialis, biceps",
        "equipment": "Dumbbells",
        "difficulty": "Beginner",
        "is_core": False,
        "description": "Neutral-grip curl for the forearms and brachialis.",
        "instructions": "Hold the dumbbells with palms facing each other. Curl up keeping the wrists neutral, then lower slowly.",
    },
    {
        "id": "back-squat",
        "name": "Back Squat",
        "muscle_group": "Quadriceps",
        "muscles": "Quadriceps, glutes, adductors",
        "equipment": "Barbell, Squat Rack",
        "difficulty": "Intermediate",
        "is_core": True,
        "description": "The main lower-body strength lift.",
        "instructions": "Bar on the upper back, feet shoulder-width. Sit down between the hips until thighs reach parallel, keep the chest up, then drive through the mid-foot to stand.",
    },
    {
        "id": "goblet-squat",
        "name": "Goblet Squat",
        "muscle_group": "Cuádriceps",
        "muscles": "Quadriceps, glutes",
        "equipment": "Dumbbells",
        "difficulty": "Beginner",
        "is_core": False,
        "description": "Front-loaded squat that teaches depth and posture.",
        "instructions": "Hold a dumbbell against the chest. Squat down keeping elbows inside the knees, pause at the bottom, then stand.",
    },
    {
        "id": "romanian-deadlift",
        "name": "Romanian Deadlift",
        "muscle_group": "Hamstrings",
        "muscles": "Hamstrings, glutes, spinal erectors",
        "equipment": "Barbell",
        "difficulty": "Intermediate",
        "is_core": True,
        "description": "Hip hinge that builds the posterior chain.",
        "instructions": "Start standing with the bar at the hips. Push the hips back with soft knees until you feel a hamstring stretch, then squeeze the glutes to return.",
    },
    {
        "id": "hip-thrust",
        "name": "Hip Thrust",
        "muscle_group": "Glúteos",
        "muscles": "Gluteus maximus, hamstrings",
        "equipment": "Barbell, Bench",
        "difficulty": "Intermediate",
        "is_core": False,
        "description": "Direct glute loading from a bench.",
        "instructions": "Upper back on the bench, bar over the hips. Drive the hips up until the torso is level, pause, then lower.",
    },
    {
        "id": "walking-lunge",
        "name": "Walking Lunge",
        "muscle_group": "Legs",
        "muscles": "Quadriceps, glutes",
        "equipment": "Dumbbells",
        "difficulty": "Beginner",
        "is_core": False,
        "description": "Unilateral leg work with a balance demand.",
        "instructions": "Step forward and lower the back knee toward the floor, keep the torso upright, then step through into the next rep.",
    },
    {
        "id": "standing-calf-raise",
        "name": "Standing Calf Raise",
        "muscle_group": "Calves",
        "muscles": "Gastrocnemius, soleus",
        "equipment": "Machine",
        "difficulty": "Beginner",
        "is_core": False,
        "description": "Isolation for the calves.",
        "instructions": "Balls of the feet on the platform. Rise as high as possible, pause, then lower into a full stretch.",
    },
    {
        "id": "leg-press",
        "name": "Leg Press",
        "muscle_group": "Piernas",
        "muscles": "Quadriceps, glutes",
        "equipment": "Machine",
        "difficulty": "Beginner",
        "is_core": False,
        "description": "Machine compound for the whole leg.",
        "instructions": "Feet shoulder-width on the platform. Lower until the knees reach about 90 degrees, then press without locking the knees.",
    },
    {
        "id": "plank",
        "name": "Plank",
        "muscle_group": "Core",
        "muscles": "Rectus abdominis, transverse abdominis",
        "equipment": "Bodyweight",
        "difficulty": "Beginner",
        "is_core": False,
        "description": "Isometric hold for trunk stability.",
        "instructions": "Forearms under shoulders, body in a straight line. Brace the abs and squeeze the glutes, holding without letting the hips drop.",
    },
    {
        "id": "hanging-leg-raise",
        "name": "Hanging Leg Raise",
        "muscle_group": "Abdominales",
        "muscles": "Rectus abdominis, hip flexors",
        "equipment": "Pull-up Bar",
        "difficulty": "Advanced",
        "is_core": False,
        "description": "Demanding lower-ab exercise from a hang.",
        "instructions": "Hang from the bar, curl the pelvis and raise the legs to hip height or higher, then lower without swinging.",
    },
]
