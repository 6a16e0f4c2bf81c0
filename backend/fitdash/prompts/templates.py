"""
Prompt templates for AI-generated insights.
"""

INSIGHT_PROMPT = (
    "You are an expert AI fitness coach. Analyze the following user data for {name} "
    "and provide 2-3 concise, actionable, and encouraging insights in a single block "
    "of text, with each insight separated by a newline. "
    "- Primary Goal: {goal_type} "
    "- Current Weight: {current_weight} kg (Goal: {goal_weight} kg) "
    "- Workout Streak: {streak} days "
    "- Average Daily Calorie Intake: {avg_intake} kcal "
    "- Average Daily Calories Burned (from workouts): {avg_burned} kcal "
    "- Recent Workouts: {recent_workouts} "
    "Based on this data, provide personalized advice."
)

# Number of most recent workouts named in the prompt
RECENT_WORKOUT_COUNT = 3
