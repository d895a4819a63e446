"""
Bangumi adapter module.

Provides integration with the public Bangumi (bgm.tv) API for searching
anime subjects and fetching their details.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from anisub.core.config import BangumiConfig
from anisub.core.domain import SeriesCandidate, SeriesDetail
from anisub.core.exceptions import MetadataError
from anisub.core.interfaces import IMetadataClient

logger = logging.getLogger(__name__)

# Bangumi subject type for anime
ANIME_SUBJECT_TYPE = 2


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _as_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


class BangumiAdapter(IMetadataClient):
    """
    Bangumi API adapter.

    Implements IMetadataClient for anime subjects. Requests are anonymous;
    failures surface as MetadataError.
    """

    def __init__(self, config: Optional[BangumiConfig] = None):
        """
        Initialize the Bangumi adapter.

        Args:
            config: Endpoint and timeout settings.
        """
        self._config = config or BangumiConfig()

    @property
    def base_url(self) -> str:
        return self._config.base_url.rstrip('/')

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = requests.get(
                url,
                params=params,
                headers={'Accept': 'application/json'},
                timeout=self._config.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f'❌ 请求Bangumi失败：{e}')
            raise MetadataError(f'请求Bangumi失败: {e}', context={'url': url}) from e

        if not response.ok:
            logger.error(f'❌ Bangumi返回错误状态码：{response.status_code}')
            raise MetadataError(
                f'Bangumi返回错误状态码: {response.status_code}',
                context={'url': url, 'status_code': response.status_code}
            )

        try:
            return response.json()
        except ValueError as e:
            raise MetadataError(f'解析Bangumi响应失败: {e}', context={'url': url}) from e

    @staticmethod
    def _parse_candidate(item: Any) -> Optional[SeriesCandidate]:
        if not isinstance(item, dict):
            return None

        subject_id = _as_int(item.get('id')) or 0
        name = _as_text(item.get('name')) or ''
        if subject_id == 0 or not name:
            return None

        return SeriesCandidate(
            id=subject_id,
            name=name,
            name_localized=_as_text(item.get('name_cn')) or None,
            type=_as_int(item.get('type')),
            date=_as_text(item.get('date')) or _as_text(item.get('air_date')),
        )

    def search_series(self, query: str, limit: int = 10) -> List[SeriesCandidate]:
        """
        Search anime subjects by name.

        Args:
            query: Free-text query; blank queries return no candidates.
            limit: Maximum number of results requested.

        Returns:
            Candidates with a non-zero id and a name, in service order.

        Raises:
            MetadataError: If the request fails.
        """
        q = (query or '').strip()
        if not q:
            return []

        url = f'{self.base_url}/search/subject/{quote(q, safe="")}'
        data = self._get_json(url, params={
            'type': ANIME_SUBJECT_TYPE,
            'responseGroup': 'small',
            'max_results': limit,
        })

        if isinstance(data, dict):
            items = data.get('list') or []
        elif isinstance(data, list):
            items = data
        else:
            items = []

        candidates = [c for c in (self._parse_candidate(it) for it in items) if c]
        logger.info(f'🔍 Bangumi搜索 \'{q}\' 找到 {len(candidates)} 个结果')
        return candidates

    def get_series_detail(self, series_id: int) -> SeriesDetail:
        """
        Get details for one subject.

        Args:
            series_id: Bangumi subject id.

        Returns:
            SeriesDetail. The year is the first four characters of the air
            date when they are digits.

        Raises:
            MetadataError: If the request fails or the payload is not an object.
        """
        data = self._get_json(f'{self.base_url}/subject/{series_id}')
        if not isinstance(data, dict):
            raise MetadataError(
                '解析Bangumi响应失败: 返回值不是对象',
                context={'id': series_id}
            )

        images = data.get('images')
        cover_url = None
        if isinstance(images, dict):
            cover_url = _as_text(images.get('large')) or _as_text(images.get('common'))
        cover_url = cover_url or _as_text(data.get('cover'))

        episode_count = _as_int(data.get('eps'))
        if episode_count is None:
            episode_count = _as_int(data.get('total_episodes'))
        if episode_count is None and isinstance(data.get('episodes'), list):
            episode_count = len(data['episodes'])

        date = _as_text(data.get('date')) or _as_text(data.get('air_date')) or ''
        year = int(date[:4]) if date[:4].isdigit() and len(date) >= 4 else None

        detail = SeriesDetail(
            id=_as_int(data.get('id')) or series_id,
            name=_as_text(data.get('name')) or '',
            name_localized=_as_text(data.get('name_cn')) or None,
            cover_url=cover_url,
            episode_count=episode_count,
            year=year,
        )
        logger.info(f'📋 获取Bangumi条目详情: {detail.display_title} ({detail.year})')
        return detail
