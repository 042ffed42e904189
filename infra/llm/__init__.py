from infra.llm.ollama import OllamaContentService, OllamaLLM, extract_json

__all__ = ["OllamaContentService", "OllamaLLM", "extract_json"]
