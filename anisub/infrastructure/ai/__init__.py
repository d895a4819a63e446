"""
AI 服务模块。

提供 LLM 集成功能，包括：
- API 客户端（HTTP 通信）
- 文件名识别器（单文件识别与批量标题推断）
"""

from anisub.infrastructure.ai.api_client import APIResponse, OpenAIClient
from anisub.infrastructure.ai.filename_classifier import (
    LLMFilenameClassifier,
    extract_json_payload,
)

__all__ = [
    'OpenAIClient',
    'APIResponse',
    'LLMFilenameClassifier',
    'extract_json_payload',
]
