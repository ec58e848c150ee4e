from typing import Dict, Any, List
from .data_classes import CompletionRequest


def _messages(request: CompletionRequest) -> List[Dict[str, str]]:
    return [{"role": "user", "content": request.prompt}]


class ClaudeConverter:
    """Convert completion requests to Claude Messages API parameters"""

    @staticmethod
    def convert_request(request: CompletionRequest, default_model: str) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "model": request.model_name or default_model,
            "max_tokens": request.max_tokens or 1024,
            "messages": _messages(request),
        }
        if request.system:
            params["system"] = request.system
        if request.temperature is not None:
            # Claude accepts temperatures up to 1.0 only
            params["temperature"] = min(request.temperature, 1.0)
        return params


class GeminiConverter:
    """Convert completion requests to Gemini generate_content keyword arguments"""

    @staticmethod
    def convert_config(request: CompletionRequest, json_mode: bool = True) -> Dict[str, Any]:
        """Keyword arguments for ``types.GenerateContentConfig``"""
        config: Dict[str, Any] = {}
        if request.system:
            config["system_instruction"] = request.system
        if request.max_tokens:
            config["max_output_tokens"] = request.max_tokens
        if request.temperature is not None:
            config["temperature"] = request.temperature
        if request.json_output and json_mode:
            config["response_mime_type"] = "application/json"
        return config


class OpenAIConverter:
    """Convert completion requests to OpenAI Chat Completions parameters"""

    @staticmethod
    def convert_request(
        request: CompletionRequest, default_model: str, json_mode: bool = True
    ) -> Dict[str, Any]:
        messages: List[Dict[str, str]] = []
        if request.system:
            messages.append({"role": "system", "content": request.system})
        messages.extend(_messages(request))

        params: Dict[str, Any] = {
            "model": request.model_name or default_model,
            "messages": messages,
        }
        if request.max_tokens:
            params["max_tokens"] = request.max_tokens
        if request.temperature is not None:
            params["temperature"] = request.temperature
        if request.json_output and json_mode:
            # json_object mode requires the word "JSON" somewhere in the messages
            text = " ".join(message["content"] for message in messages)
            if "json" in text.lower():
                params["response_format"] = {"type": "json_object"}
        return params
