"""
Domain Constants

Centrally manages constants shared across the benchmark engine.
"""

# Weight applied to each task type's average score in the overall score
TASK_WEIGHTS = {
    "factual": 1.0,
    "reasoning": 1.2,
    "coding": 1.5,
    "creativity": 0.8,
    "toolCalling": 1.0,
}

# Weight for task types not listed above
DEFAULT_TASK_WEIGHT = 1.0

# Task type whose prompts feed the tool-calling sub-benchmark
TOOL_CALLING_TASK_TYPE = "toolCalling"

# A tool-calling case counts as a success at or above this score (correct tool called)
TOOL_CALL_SUCCESS_THRESHOLD = 50.0

# Request timeout for the scored backend call
DEFAULT_TIMEOUT_SECONDS = 30

# Maximum number of runs kept in the history
HISTORY_LIMIT = 20

# Key under which the run history is stored
HISTORY_KEY = "benchmark_history"

# Rough token estimate (1 token ~ 4 characters of English text)
CHARS_PER_TOKEN = 4
