"""Infrastructure: persistence, queue, LLM runner, prompts and agent tools."""
