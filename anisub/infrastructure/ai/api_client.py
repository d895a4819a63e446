"""
Chat Completions API 客户端模块。

提供 OpenAI 兼容接口的 HTTP 通信功能。
只负责网络请求，不包含业务逻辑。
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


@dataclass
class APIResponse:
    """
    API 响应数据类。

    Attributes:
        success: 请求是否成功
        content: 响应内容（成功时）
        error_code: HTTP 错误代码（失败时）
        error_message: 错误消息（失败时）
        response_time_ms: 响应时间（毫秒）
    """
    success: bool
    content: Optional[str] = None
    error_code: Optional[int] = None
    error_message: Optional[str] = None
    response_time_ms: int = 0


class OpenAIClient:
    """
    OpenAI 兼容接口客户端。

    只负责 HTTP 通信，不做重试。``url`` 是完整的 chat completions 地址
    （如本地 Ollama / LM Studio 的 ``/v1/chat/completions``）。

    Example:
        >>> client = OpenAIClient(timeout=300)
        >>> response = client.call(
        ...     url='http://localhost:11434/v1/chat/completions',
        ...     model='qwen/qwen3-vl-8b',
        ...     messages=[{'role': 'user', 'content': 'Hello'}]
        ... )
        >>> if response.success:
        ...     print(response.content)
    """

    def __init__(self, timeout: int = 300):
        """
        初始化客户端。

        Args:
            timeout: 请求超时时间（秒），默认 300 秒（本地模型推理较慢）
        """
        self._timeout = timeout

    def call(
        self,
        url: str,
        model: str,
        messages: List[Dict[str, str]],
        temperature: float = 0.1,
        max_tokens: Optional[int] = None,
        api_key: Optional[str] = None
    ) -> APIResponse:
        """
        发送 API 请求。

        Args:
            url: 完整的 chat completions 地址
            model: 模型名称
            messages: 消息列表
            temperature: 采样温度
            max_tokens: 最大生成 token 数
            api_key: 可选的 API Key（本地模型通常不需要）

        Returns:
            APIResponse: 响应数据
        """
        start_time = time.time()

        headers = {'Content-Type': 'application/json'}
        if api_key:
            headers['Authorization'] = f'Bearer {api_key}'

        payload: Dict[str, Any] = {
            'model': model,
            'messages': messages,
            'temperature': temperature
        }
        if max_tokens:
            payload['max_tokens'] = max_tokens

        try:
            response = requests.post(
                url,
                headers=headers,
                json=payload,
                timeout=self._timeout
            )
        except requests.Timeout:
            logger.error(f'❌ API 请求超时: {self._timeout}s')
            return APIResponse(
                success=False,
                error_message=f'Request timeout after {self._timeout}s',
                response_time_ms=self._elapsed_ms(start_time)
            )
        except requests.ConnectionError as e:
            logger.error(f'❌ API 连接错误: {e}')
            return APIResponse(
                success=False,
                error_message=f'Connection error: {e}',
                response_time_ms=self._elapsed_ms(start_time)
            )
        except requests.RequestException as e:
            logger.error(f'❌ API 请求异常: {e}')
            return APIResponse(
                success=False,
                error_message=f'Request error: {e}',
                response_time_ms=self._elapsed_ms(start_time)
            )

        response_time_ms = self._elapsed_ms(start_time)

        if response.status_code != 200:
            error_message = self._extract_error_message(response)
            logger.warning(
                f'⚠️ API 请求失败: {response.status_code}, '
                f'{error_message[:100]}'
            )
            return APIResponse(
                success=False,
                error_code=response.status_code,
                error_message=error_message,
                response_time_ms=response_time_ms
            )

        try:
            result = response.json()
            content = result['choices'][0]['message']['content']
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f'❌ 无法从响应中获取内容: {e}')
            return APIResponse(
                success=False,
                error_code=response.status_code,
                error_message=f'Malformed response: {response.text[:500]}',
                response_time_ms=response_time_ms
            )

        if not isinstance(content, str):
            return APIResponse(
                success=False,
                error_code=response.status_code,
                error_message='Response has no text content',
                response_time_ms=response_time_ms
            )

        logger.debug(f'🤖 API 请求成功: {model}, 响应时间: {response_time_ms}ms')
        return APIResponse(
            success=True,
            content=content.strip(),
            response_time_ms=response_time_ms
        )

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.time() - start_time) * 1000)

    def _extract_error_message(self, response: requests.Response) -> str:
        """
        从响应中提取错误消息。

        Args:
            response: HTTP 响应对象

        Returns:
            错误消息字符串
        """
        try:
            error_data = response.json()
        except ValueError:
            return response.text[:500] if response.text else f'HTTP {response.status_code}'

        if isinstance(error_data, dict) and 'error' in error_data:
            error = error_data['error']
            if isinstance(error, dict):
                return str(error.get('message', error))
            return str(error)
        return response.text[:500]
