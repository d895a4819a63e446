"""
Dependency Injection Container module.

Contains the Container class for managing application dependencies.
"""

from dependency_injector import containers, providers

from anisub.core.config import settings_store as default_settings_store

# AI Components
from anisub.infrastructure.ai.api_client import OpenAIClient
from anisub.infrastructure.ai.filename_classifier import LLMFilenameClassifier

# External Adapters
from anisub.infrastructure.filesystem.local_filesystem import LocalFileSystem
from anisub.infrastructure.metadata.bangumi_adapter import BangumiAdapter

# Recognition Services
from anisub.services.recognition.metadata_merger import MetadataMerger
from anisub.services.recognition.recognition_service import RecognitionService
from anisub.services.recognition.title_inferrer import SeriesTitleInferrer

# Rename Services
from anisub.services.rename.episode_aligner import EpisodeAligner
from anisub.services.rename.episode_extractor import EpisodeKeyExtractor
from anisub.services.rename.file_classifier import FileClassifier
from anisub.services.rename.filename_formatter import FilenameFormatter
from anisub.services.rename.rename_executor import RenameExecutor
from anisub.services.rename.rename_planner import RenamePlanner
from anisub.services.rename.rename_service import RenameService


class Container(containers.DeclarativeContainer):
    """
    依赖注入容器。

    管理应用程序所有依赖的生命周期和注入。

    服务层次结构:
    1. Settings (设置存储)
    2. Rename Engine (剧集对齐与字幕重命名)
    3. External Adapters (文件系统、LLM、Bangumi)
    4. Recognition Engine (标题推断与元数据合并)
    """

    # ===== Settings =====
    settings_store = providers.Object(default_settings_store)
    settings = settings_store.provided.current

    # ===== Rename Engine =====
    episode_extractor = providers.Singleton(EpisodeKeyExtractor)

    file_classifier = providers.Singleton(
        FileClassifier,
        extractor=episode_extractor
    )

    episode_aligner = providers.Singleton(
        EpisodeAligner,
        extractor=episode_extractor
    )

    filename_formatter = providers.Singleton(FilenameFormatter)

    rename_planner = providers.Singleton(
        RenamePlanner,
        formatter=filename_formatter
    )

    # ===== External Adapters =====
    filesystem = providers.Singleton(
        LocalFileSystem,
        classifier=file_classifier
    )

    api_client = providers.Singleton(
        OpenAIClient,
        timeout=settings.llm.timeout
    )

    filename_classifier = providers.Singleton(
        LLMFilenameClassifier,
        api_client=api_client,
        settings_store=settings_store
    )

    metadata_client = providers.Singleton(
        BangumiAdapter,
        config=settings.bangumi
    )

    # ===== Rename Service =====
    rename_executor = providers.Singleton(
        RenameExecutor,
        filesystem=filesystem
    )

    rename_service = providers.Singleton(
        RenameService,
        filesystem=filesystem,
        extractor=episode_extractor,
        classifier=file_classifier,
        aligner=episode_aligner,
        planner=rename_planner,
        executor=rename_executor,
        settings_store=settings_store
    )

    # ===== Recognition Engine =====
    title_inferrer = providers.Singleton(
        SeriesTitleInferrer,
        classifier=filename_classifier,
        delay=settings.llm.request_delay
    )

    metadata_merger = providers.Singleton(
        MetadataMerger,
        classifier=filename_classifier,
        formatter=filename_formatter,
        delay=settings.llm.request_delay
    )

    recognition_service = providers.Singleton(
        RecognitionService,
        classifier=filename_classifier,
        metadata_client=metadata_client,
        inferrer=title_inferrer,
        merger=metadata_merger,
        delay=settings.llm.request_delay,
        search_limit=settings.bangumi.search_limit
    )


# 全局容器实例
container = Container()
