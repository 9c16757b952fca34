"""
Task Catalog

Built-in benchmark tasks and tool definitions, plus a JSON loader for
extending the catalog without code changes.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path

from bench_gauge_core.domain.value_objects import EvaluationMethod


@dataclass(frozen=True)
class CodeTestCase:
    """Input/expected pair documenting a coding prompt"""
    input: str
    expected: object


@dataclass(frozen=True)
class PromptCase:
    """A scripted prompt and its grading rule"""
    prompt: str
    evaluation_method: EvaluationMethod
    expected_answer: str | None = None
    explanation: str | None = None
    evaluation_criteria: tuple[str, ...] = ()
    test_cases: tuple[CodeTestCase, ...] = ()
    expected_elements: tuple[str, ...] = ()
    expected_tool: str | None = None
    expected_args: dict | None = None


@dataclass(frozen=True)
class BenchmarkTask:
    """A group of prompt cases sharing a task type"""
    type: str
    name: str
    prompts: tuple[PromptCase, ...]
    requires_tools: bool = False  # Attach the tool definitions to every call


@dataclass(frozen=True)
class ToolDefinition:
    """A callable capability offered to the backend"""
    name: str
    description: str
    parameters: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


DEFAULT_TASKS: dict[str, BenchmarkTask] = {
    "factual": BenchmarkTask(
        type="factual",
        name="Factual Knowledge",
        prompts=(
            PromptCase("What is the capital of France?", EvaluationMethod.EXACT_MATCH, expected_answer="Paris"),
            PromptCase("Who wrote 'Pride and Prejudice'?", EvaluationMethod.EXACT_MATCH, expected_answer="Jane Austen"),
            PromptCase("What year did World War II end?", EvaluationMethod.EXACT_MATCH, expected_answer="1945"),
            PromptCase("What is the chemical symbol for gold?", EvaluationMethod.EXACT_MATCH, expected_answer="Au"),
            PromptCase("What is the largest planet in our solar system?", EvaluationMethod.EXACT_MATCH, expected_answer="Jupiter"),
        ),
    ),
    "reasoning": BenchmarkTask(
        type="reasoning",
        name="Logical Reasoning",
        prompts=(
            PromptCase(
                "If all A are B, and some B are C, can we conclude that some A are C?",
                EvaluationMethod.LOGICAL_ANALYSIS,
                expected_answer="No",
                explanation=(
                    "This is a logical fallacy. While all A are B, and some B are C, "
                    "the B that are C might not include any A."
                ),
            ),
            PromptCase(
                "A bat and ball cost $1.10 in total. The bat costs $1.00 more than the ball. "
                "How much does the ball cost?",
                EvaluationMethod.EXACT_MATCH,
                expected_answer="0.05",
                explanation=(
                    "If the ball costs x, then the bat costs x + 1.00. Together they cost 1.10, "
                    "so x + (x + 1.00) = 1.10. Solving for x: 2x + 1.00 = 1.10, 2x = 0.10, x = 0.05."
                ),
            ),
            PromptCase(
                "If it takes 5 machines 5 minutes to make 5 widgets, "
                "how long would it take 100 machines to make 100 widgets?",
                EvaluationMethod.EXACT_MATCH,
                expected_answer="5",
                explanation="Each machine makes 1 widget in 5 minutes. So 100 machines would make 100 widgets in 5 minutes.",
            ),
            PromptCase(
                "Mary's father has five daughters: 1. Nana, 2. Nene, 3. Nini, 4. Nono. "
                "What is the name of the fifth daughter?",
                EvaluationMethod.EXACT_MATCH,
                expected_answer="Mary",
                explanation="The question states that Mary's father has five daughters, so Mary must be one of them.",
            ),
            PromptCase(
                "A farmer has 15 sheep, and all but 8 die. How many sheep are left?",
                EvaluationMethod.EXACT_MATCH,
                expected_answer="8",
                explanation="The phrase 'all but 8' means that 8 sheep remain.",
            ),
        ),
    ),
    "coding": BenchmarkTask(
        type="coding",
        name="Code Generation",
        prompts=(
            PromptCase(
                "Write a JavaScript function that checks if a string is a palindrome.",
                EvaluationMethod.CODE,
                evaluation_criteria=(
                    "Function correctly identifies palindromes",
                    "Handles case sensitivity",
                    "Handles spaces and special characters",
                    "Has proper error handling",
                ),
                test_cases=(
                    CodeTestCase("racecar", True),
                    CodeTestCase("hello", False),
                    CodeTestCase("A man a plan a canal Panama", True),
                ),
            ),
            PromptCase(
                "Write a Python function to find the second largest number in a list.",
                EvaluationMethod.CODE,
                evaluation_criteria=(
                    "Function correctly finds the second largest number",
                    "Handles duplicate values",
                    "Handles empty lists or lists with one element",
                    "Has proper error handling",
                ),
                test_cases=(
                    CodeTestCase("[1, 2, 3, 4, 5]", 4),
                    CodeTestCase("[5, 5, 4, 3, 2]", 4),
                    CodeTestCase("[1]", "Error or None"),
                ),
            ),
            PromptCase(
                "Write a SQL query to find the top 5 customers who have spent the most money.",
                EvaluationMethod.SQL,
                evaluation_criteria=(
                    "Query correctly selects top 5 customers",
                    "Uses appropriate aggregation functions",
                    "Includes proper sorting",
                    "Handles ties appropriately",
                ),
                expected_elements=("SELECT", "FROM", "GROUP BY", "ORDER BY", "LIMIT"),
            ),
        ),
    ),
    "creativity": BenchmarkTask(
        type="creativity",
        name="Creativity & Writing",
        prompts=(
            PromptCase(
                "Write a short poem about artificial intelligence.",
                EvaluationMethod.CREATIVITY,
                evaluation_criteria=(
                    "Relevance to the topic",
                    "Creative use of language",
                    "Coherence and structure",
                    "Originality",
                ),
            ),
            PromptCase(
                "Write a brief story about a time traveler who accidentally changes history.",
                EvaluationMethod.CREATIVITY,
                evaluation_criteria=(
                    "Narrative coherence",
                    "Character development",
                    "Creative plot elements",
                    "Engagement and interest",
                ),
            ),
            PromptCase(
                "Describe a new invention that could solve a common everyday problem.",
                EvaluationMethod.CREATIVITY,
                evaluation_criteria=(
                    "Innovation and originality",
                    "Practicality and feasibility",
                    "Clear description of the problem and solution",
                    "Consideration of potential impacts",
                ),
            ),
        ),
    ),
    "toolCalling": BenchmarkTask(
        type="toolCalling",
        name="Tool Calling",
        requires_tools=True,
        prompts=(
            PromptCase(
                "What's the weather like in New York City today?",
                EvaluationMethod.TOOL_CALL,
                expected_tool="get_weather",
                expected_args={"location": "New York City"},
            ),
            PromptCase(
                "Calculate 235 + 467 and then multiply by 3.",
                EvaluationMethod.TOOL_CALL,
                expected_tool="calculator",
                expected_args={"operation": "add", "operands": [235, 467]},
            ),
            PromptCase(
                "Search for information about SpaceX Starship.",
                EvaluationMethod.TOOL_CALL,
                expected_tool="search",
                expected_args={"query": "SpaceX Starship"},
            ),
        ),
    ),
}


DEFAULT_TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="get_weather",
        description="Get the current weather in a given location",
        parameters={
            "type": "object",
            "properties": {
                "location": {
                    "type": "string",
                    "description": "The city and state, e.g. San Francisco, CA",
                },
                "unit": {
                    "type": "string",
                    "enum": ["celsius", "fahrenheit"],
                    "description": "The temperature unit to use",
                },
            },
            "required": ["location"],
        },
    ),
    ToolDefinition(
        name="calculator",
        description="Perform mathematical calculations",
        parameters={
            "type": "object",
            "properties": {
                "operation": {
                    "type": "string",
                    "enum": ["add", "subtract", "multiply", "divide"],
                    "description": "The operation to perform",
                },
                "operands": {
                    "type": "array",
                    "items": {"type": "number"},
                    "description": "The numbers to operate on",
                },
            },
            "required": ["operation", "operands"],
        },
    ),
    ToolDefinition(
        name="search",
        description="Search for information on a topic",
        parameters={
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "The search query"},
                "limit": {"type": "integer", "description": "Maximum number of results to return"},
            },
            "required": ["query"],
        },
    ),
)


def _parse_prompt_case(data: dict) -> PromptCase:
    """
    Create a PromptCase object from dictionary data

    Accepts both snake_case and the camelCase keys used by exported catalogs.

    Raises:
        ValueError: If the evaluation method is unknown
    """
    method = data.get("evaluation_method", data.get("evaluationMethod"))
    try:
        evaluation_method = EvaluationMethod(method)
    except ValueError:
        valid = [m.value for m in EvaluationMethod]
        raise ValueError(f"Invalid evaluation method: {method}. Valid values: {valid}")

    def pick(snake: str, camel: str, default=None):
        return data.get(snake, data.get(camel, default))

    return PromptCase(
        prompt=data["prompt"],
        evaluation_method=evaluation_method,
        expected_answer=pick("expected_answer", "expectedAnswer"),
        explanation=data.get("explanation"),
        evaluation_criteria=tuple(pick("evaluation_criteria", "evaluationCriteria", [])),
        test_cases=tuple(
            CodeTestCase(input=tc["input"], expected=tc.get("expected"))
            for tc in pick("test_cases", "testCases", [])
        ),
        expected_elements=tuple(pick("expected_elements", "expectedElements", [])),
        expected_tool=pick("expected_tool", "expectedTool"),
        expected_args=pick("expected_args", "expectedArgs"),
    )


def _parse_task_data(task_type: str, data: dict) -> BenchmarkTask:
    """Create a BenchmarkTask object from dictionary data"""
    return BenchmarkTask(
        type=task_type,
        name=data.get("name", task_type),
        prompts=tuple(_parse_prompt_case(p) for p in data["prompts"]),
        requires_tools=data.get("requires_tools", data.get("requiresTools", False)),
    )


def load_task_catalog(
    file_path: str | Path,
    base: dict[str, BenchmarkTask] | None = None,
    base_tools: tuple[ToolDefinition, ...] = DEFAULT_TOOLS,
) -> tuple[dict[str, BenchmarkTask], tuple[ToolDefinition, ...]]:
    """
    Load a task catalog extension from a JSON file

    Tasks in the file replace built-in tasks of the same type; tools replace
    built-in tools of the same name.

    Args:
        file_path: Path to the JSON file
        base: Catalog to extend (defaults to DEFAULT_TASKS)
        base_tools: Tool definitions to extend

    Returns:
        Tuple of (task catalog, tool definitions)

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file contains an invalid evaluation method
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Task catalog file not found: {file_path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    tasks = dict(DEFAULT_TASKS if base is None else base)
    for task_type, task_data in data.get("tasks", {}).items():
        tasks[task_type] = _parse_task_data(task_type, task_data)

    tools = {tool.name: tool for tool in base_tools}
    for tool_data in data.get("tools", []):
        # Accept both the flat form and the {"type": "function", "function": {...}} wrapper
        fn = tool_data.get("function", tool_data)
        tools[fn["name"]] = ToolDefinition(
            name=fn["name"],
            description=fn.get("description", ""),
            parameters=fn.get("parameters", {}),
        )

    return tasks, tuple(tools.values())
