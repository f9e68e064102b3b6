"""Agent implementations"""

# Agents are imported lazily so `import agents` does not pull in strands
# until an agent is actually used:
# - ScriptWriterAgent (agents/script_writer.py)
# - ClipPlannerAgent (agents/clip_planner.py)

__all__ = [
    "StudioAgent",
    "ScriptWriterAgent",
    "ClipPlannerAgent",
    "AGENT_REGISTRY",
    "get_all_agents",
    "get_agent_schema",
]


def __getattr__(name):
    """Lazy imports to avoid circular dependencies"""
    if name == "StudioAgent":
        from .base import StudioAgent
        return StudioAgent
    elif name == "ScriptWriterAgent":
        from .script_writer import ScriptWriterAgent
        return ScriptWriterAgent
    elif name == "ClipPlannerAgent":
        from .clip_planner import ClipPlannerAgent
        return ClipPlannerAgent
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


# Agent Registry for CLI introspection and dynamic loading
AGENT_REGISTRY = {
    "script_writer": {
        "name": "script_writer",
        "class": "ScriptWriterAgent",
        "module": "agents.script_writer",
        "status": "implemented",
        "description": "Writes narration for every template section, concurrently",
        "inputs": {
            "video": "VideoInfo - Source video",
            "analysis": "VideoAnalysis - Scenes, objects and emotions",
            "template": "ScriptTemplate - Section structure",
            "model": "AIModelRef - Text model",
            "params": "ScriptParams - Style, tone, length, audience, language",
        },
        "outputs": "ScriptData - One segment per template section",
    },
    "clip_planner": {
        "name": "clip_planner",
        "class": "ClipPlannerAgent",
        "module": "agents.clip_planner",
        "status": "implemented",
        "description": "Suggests and applies cuts from scene and audio analysis",
        "inputs": {
            "video": "VideoInfo - Source video",
            "analysis": "VideoAnalysis - Scenes and audio loudness",
            "target_duration": "float - Desired output length in seconds",
            "pacing_style": "PacingStyle - fast, normal or slow",
        },
        "outputs": "ClipPlan - Clips placed back to back on the output timeline",
    },
}


def get_all_agents():
    """
    Get all agents with their metadata.

    Returns:
        list: List of all agent metadata dicts
    """
    return list(AGENT_REGISTRY.values())


def get_agent_schema(name: str):
    """
    Get schema for a specific agent.

    Args:
        name: Agent name

    Returns:
        dict: Agent metadata including inputs/outputs, or None if not found
    """
    return AGENT_REGISTRY.get(name)
