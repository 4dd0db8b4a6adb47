"""
Provider implementations: ``openai.OpenAIModel``, ``claude.ClaudeModel`` and
``gemini.GeminiModel``. Modules are imported on demand by
``LLM_API.create_llm_client`` so only the selected SDK is loaded.
"""
