"""处理流水线：按顺序逐个文件执行上色并汇总结果。"""

from __future__ import annotations

import gc
import logging
import time
from typing import Optional, Sequence

from colorize_batch.core.config import Options
from colorize_batch.core.models import BatchSummary, Job
from colorize_batch.core.output_paths import resolve_output_path
from colorize_batch.core.progress import ConsoleFeedback
from colorize_batch.processing.file_processor import FileProcessor

LOGGER = logging.getLogger(__name__)


def run_batch(
    jobs: Sequence[Job],
    options: Options,
    processor: FileProcessor,
    feedback: Optional[ConsoleFeedback] = None,
) -> BatchSummary:
    """批量处理入口：严格按输入顺序串行处理，单个文件失败不影响其他文件。

    多文件时在相邻两个文件之间强制执行一次垃圾回收，保证上一张图片占用的
    内存在加载下一张之前被释放。
    """

    feedback = feedback or processor.feedback
    summary = BatchSummary()
    total = len(jobs)
    started = time.perf_counter()
    LOGGER.info("开始批处理，共 %d 个文件", total)

    for index, job in enumerate(jobs, start=1):
        if index > 1:
            collected = gc.collect()
            LOGGER.debug("文件间垃圾回收，释放 %d 个对象", collected)

        feedback.batch_item(index, total, job.input_path)
        # 显式给出的输出路径直接使用（允许覆盖），否则在处理前一刻推导。
        output_path = job.output_path or resolve_output_path(job.input_path, options.output_dir)
        result = processor.process(job.input_path, output_path)
        feedback.file_result(result)
        summary.results.append(result)

    summary.elapsed_seconds = time.perf_counter() - started
    LOGGER.info(
        "批处理结束：成功 %d，失败 %d，耗时 %.2fs",
        summary.successful,
        summary.failed,
        summary.elapsed_seconds,
    )
    return summary
