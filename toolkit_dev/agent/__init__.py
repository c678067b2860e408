"""
Agent dispatch: selected toolkits -> namespaced tools + system prompt, the
tool-calling loop that runs them, and background agent runs.
"""
from .config import (
    CoreAgentConfig,
    SimpleTool,
    SimpleToolkit,
    create_agent_config,
    create_core_agent_config,
    default_base_system_prompt,
)
