"""Define Prompts — static prompt templates served by prompts/list and prompts/get.

Invariants:
    - Prompts take no arguments and are immutable for the process lifetime
    - prompts/list exposes name + description only; messages come from prompts/get
"""

PROMPTS = [
    {
        "name": "simple_prompt",
        "description": "A prompt without arguments",
        "messages": [
            {
                "role": "user",
                "content": {
                    "type": "text",
                    "text": "This is a simple prompt without arguments.",
                },
            },
        ],
    },
]

_BY_NAME = {prompt["name"]: prompt for prompt in PROMPTS}


def list_prompts() -> list[dict]:
    return [
        {"name": p["name"], "description": p["description"]} for p in PROMPTS
    ]


def get_prompt(name: str) -> dict | None:
    prompt = _BY_NAME.get(name)
    if prompt is None:
        return None
    return {"description": prompt["description"], "messages": prompt["messages"]}
