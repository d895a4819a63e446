"""
AI 文件名识别模块。

实现 IFilenameClassifier 接口，使用本地或远程 LLM 识别动漫文件名。
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from anisub.core.config import AppConfig, SettingsStore, settings_store as default_settings_store
from anisub.core.domain import AnimeInfo, InferredTitle
from anisub.core.exceptions import AIError, AIResponseParseError, describe_error
from anisub.core.interfaces import IFilenameClassifier, LLMResponse

from .api_client import OpenAIClient
from .prompts import (
    build_batch_user_prompt,
    build_filename_user_prompt,
    get_batch_title_system_prompt,
    get_filename_analyze_system_prompt,
)

logger = logging.getLogger(__name__)

# 部分推理模型会输出思考链
_THINK_BLOCK = re.compile(r'<seed:think>.*?</seed:think>', re.DOTALL)


def extract_json_payload(content: str) -> Dict[str, Any]:
    """
    从模型输出中提取 JSON 对象。

    先去除思考链，直接解析失败时再去除 Markdown 代码块重试。

    Raises:
        AIResponseParseError: 内容不是 JSON 对象
    """
    cleaned = _THINK_BLOCK.sub('', content or '')

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        stripped = cleaned.strip()
        if stripped.startswith('```json'):
            stripped = stripped[7:]
        if stripped.startswith('```'):
            stripped = stripped[3:]
        if stripped.endswith('```'):
            stripped = stripped[:-3]
        try:
            data = json.loads(stripped.strip())
        except json.JSONDecodeError as e:
            raise AIResponseParseError(
                f'解析LLM响应格式失败: {e}',
                raw_response=content
            ) from e

    if not isinstance(data, dict):
        raise AIResponseParseError(
            '解析LLM响应格式失败: 返回值不是 JSON 对象',
            raw_response=content
        )
    return data


class LLMFilenameClassifier(IFilenameClassifier):
    """
    LLM 文件名识别器。

    模型地址和名称默认取自当前设置，每次调用时读取，保存设置后立即生效。

    Example:
        >>> classifier = LLMFilenameClassifier()
        >>> info = classifier.classify('[LoliHouse] Frieren - 05 [1080p].mkv')
        >>> info.episode
        5
    """

    def __init__(
        self,
        api_client: Optional[OpenAIClient] = None,
        settings_store: Optional[SettingsStore] = None
    ):
        """
        初始化识别器。

        Args:
            api_client: API 客户端（可选，默认按设置的超时创建）
            settings_store: 设置存储（可选，默认使用全局实例）
        """
        self._settings_store = settings_store or default_settings_store
        self._api_client = api_client or OpenAIClient(
            timeout=self._settings.llm.timeout
        )

    @property
    def _settings(self) -> AppConfig:
        return self._settings_store.current

    def _request(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        model_url: Optional[str],
        model_name: Optional[str]
    ) -> Dict[str, Any]:
        settings = self._settings
        response = self._api_client.call(
            url=model_url or settings.model_url,
            model=model_name or settings.model_name,
            messages=[
                {'role': 'system', 'content': system_prompt},
                {'role': 'user', 'content': user_prompt}
            ],
            temperature=temperature,
            max_tokens=settings.llm.max_tokens,
            api_key=settings.llm.api_key
        )

        if not response.success:
            raise AIError(
                f'LLM 请求失败: {describe_error(response.error_message)}',
                context={'status_code': response.error_code}
            )

        logger.debug(f'LLM响应内容: {response.content[:500]}')
        return extract_json_payload(response.content)

    @staticmethod
    def _to_anime_info(data: Dict[str, Any]) -> AnimeInfo:
        try:
            return AnimeInfo.from_dict(data)
        except (TypeError, ValueError, OverflowError) as e:
            raise AIResponseParseError(
                f'LLM 响应字段无效: {e}',
                raw_response=json.dumps(data, ensure_ascii=False, default=str)
            ) from e

    def classify(
        self,
        filename: str,
        model_url: Optional[str] = None,
        model_name: Optional[str] = None
    ) -> AnimeInfo:
        """
        识别单个文件名。

        Args:
            filename: 文件名
            model_url: 覆盖设置中的模型地址
            model_name: 覆盖设置中的模型名称

        Returns:
            AnimeInfo: 识别结果

        Raises:
            AIError: 请求失败
            AIResponseParseError: 响应无法解析
        """
        logger.info(f'🤖 开始识别文件名: {filename[:80]}')
        data = self._request(
            get_filename_analyze_system_prompt(),
            build_filename_user_prompt(filename),
            self._settings.llm.temperature,
            model_url,
            model_name
        )
        info = self._to_anime_info(data)
        logger.info(f'✅ 识别成功: {info.title} E{info.episode:02d}')
        return info

    def classify_batch(
        self,
        filenames: List[str],
        model_url: Optional[str] = None,
        model_name: Optional[str] = None
    ) -> InferredTitle:
        """
        一次请求推断一组文件名共同对应的标题。

        Raises:
            AIError: 文件列表为空或请求失败
            AIResponseParseError: 响应无法解析或标题为空
        """
        if not filenames:
            raise AIError('文件列表为空')

        logger.info(f'🤖 批量推断标题: {len(filenames)} 个文件名')
        data = self._request(
            get_batch_title_system_prompt(),
            build_batch_user_prompt(filenames),
            self._settings.llm.batch_temperature,
            model_url,
            model_name
        )

        info = self._to_anime_info(data)
        if not info.title:
            raise AIResponseParseError(
                'LLM 返回的标题为空',
                raw_response=json.dumps(data, ensure_ascii=False)
            )
        return InferredTitle(title=info.title, confidence=info.confidence)

    def analyze_filename(
        self,
        filename: str,
        model_url: Optional[str] = None,
        model_name: Optional[str] = None
    ) -> LLMResponse:
        """识别单个文件名，错误包装进 LLMResponse。"""
        try:
            return LLMResponse(success=True, data=self.classify(filename, model_url, model_name))
        except AIError as e:
            logger.warning(f'⚠️ 文件名识别失败: {e}')
            return LLMResponse(success=False, error=describe_error(e))

    def analyze_filenames_batch(
        self,
        filenames: List[str],
        model_url: Optional[str] = None,
        model_name: Optional[str] = None
    ) -> LLMResponse:
        """批量推断标题，错误包装进 LLMResponse。"""
        try:
            return LLMResponse(
                success=True,
                data=self.classify_batch(filenames, model_url, model_name)
            )
        except AIError as e:
            logger.warning(f'⚠️ 批量推断失败: {e}')
            return LLMResponse(success=False, error=describe_error(e))
