# playdiag/services/diagnostics/service.py
from __future__ import annotations

import threading
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from playdiag.common.concurrency.thread_manager import JoinCancelled, ThreadManager
from playdiag.common.logging import get_logger
from playdiag.common.settings import Settings, get_settings
from playdiag.domain.entities.frames import FrameSample
from playdiag.domain.entities.issue import Issue
from playdiag.domain.entities.probe import ContainerFormat
from playdiag.domain.entities.report import DiagnosticReport, VideoEvaluation
from playdiag.domain.entities.streams import SubtitleStream, VideoStream
from playdiag.domain.errors import AnalysisCancelled, InputNotFound
from playdiag.domain.policies.audio_rules import evaluate_audio
from playdiag.domain.policies.integrity_rules import evaluate_integrity
from playdiag.domain.policies.report_aggregator import aggregate_report
from playdiag.domain.policies.stream_classifier import ClassifiedStreams, classify_streams
from playdiag.domain.policies.subtitle_rules import evaluate_subtitles
from playdiag.domain.policies.video_rules import evaluate_container, evaluate_video
from playdiag.domain.ports.integrity import DecodeValidatorPort
from playdiag.domain.ports.probe import FrameSamplerPort, MediaProbePort
from playdiag.domain.ports.sidecars import SidecarListerPort

logger = get_logger(__name__)


class DiagnosticService:
    """
    Runs one analysis end to end:
      probe (once) -> classify -> fan out [video, audio, subtitle, integrity] -> join -> aggregate.

    Collaborators are injected; the defaults are the ffprobe/ffmpeg/local-fs adapters.
    One instance may serve concurrent analyses: it holds no per-run state.
    """

    def __init__(
        self,
        *,
        probe: Optional[MediaProbePort] = None,
        frames: Optional[FrameSamplerPort] = None,
        validator: Optional[DecodeValidatorPort] = None,
        sidecars: Optional[SidecarListerPort] = None,
        settings: Optional[Settings] = None,
    ):
        self.cfg = settings or get_settings()
        if probe is None or frames is None:
            from playdiag.services.probe.ffprobe_adapter import FFprobeAdapter
            ffprobe = FFprobeAdapter()
            probe = probe or ffprobe
            frames = frames or ffprobe
        if validator is None:
            from playdiag.services.probe.ffmpeg_validator import FFmpegDecodeValidator
            validator = FFmpegDecodeValidator()
        if sidecars is None:
            from playdiag.services.filesystem.sidecars import LocalSidecarLister
            sidecars = LocalSidecarLister()
        self.probe = probe
        self.frames = frames
        self.validator = validator
        self.sidecars = sidecars

    # --- main ---------------------------------------------------------------

    def analyze(self, path: Path | str, *, cancel_event: Optional[threading.Event] = None) -> DiagnosticReport:
        src = Path(path)
        if not src.is_file():
            raise InputNotFound(f"File not found: {src}")

        logger.info("Analyzing %s", src)
        # Structural failures (ProbeUnavailable / ProbeParseError) propagate from here.
        data = self.probe.probe(src)
        streams = classify_streams(data.streams)
        container = data.container
        logger.debug(
            "%s: container=%s video=%d (playable %d) audio=%d subtitle=%d",
            src.name, container.format_name, streams.video_count, len(streams.playable_video),
            len(streams.audio), len(streams.subtitle),
        )

        container_issues = evaluate_container(container)

        with ThreadManager(name="diagnose", max_workers=self.cfg.analysis.workers) as tm:
            stop = tm.stop_event
            tm.submit("video", self._video_task, src, container, streams, stop)
            tm.submit("audio", evaluate_audio, streams.audio, container)
            tm.submit("subtitle", self._subtitle_task, src, streams.subtitle)
            tm.submit("integrity", self._integrity_task, src, stop)
            try:
                results = tm.join(cancel_event)
            except JoinCancelled as e:
                logger.info("Analysis of %s cancelled", src)
                raise AnalysisCancelled(f"Analysis of {src} was cancelled") from e

        report = aggregate_report(
            str(src),
            container,
            container_issues=container_issues,
            video=results["video"],
            audio_issues=results["audio"],
            subtitle_issues=results["subtitle"],
            integrity_issues=results["integrity"],
        )
        logger.info(
            "Analyzed %s: %d critical, %d warning(s)", src.name, report.critical_count, report.warning_count
        )
        return report

    # --- tasks --------------------------------------------------------------

    def _video_task(
        self,
        src: Path,
        container: ContainerFormat,
        streams: ClassifiedStreams,
        stop: threading.Event,
    ) -> VideoEvaluation:
        playable: Sequence[VideoStream] = streams.playable_video
        max_samples = self.cfg.analysis.gop_sample_frames
        frames: Dict[int, List[FrameSample]] = {
            v.index: self.frames.sample_frames(src, v.index, max_samples, stop) for v in playable
        }
        return evaluate_video(
            playable,
            container,
            frames,
            video_count=streams.video_count,
            gop_warn_frames=self.cfg.analysis.gop_warn_frames,
            high_bitrate_bps=self.cfg.analysis.high_bitrate_bps,
        )

    def _subtitle_task(self, src: Path, subs: Sequence[SubtitleStream]) -> List[Issue]:
        siblings = self.sidecars.list_matching(src.parent, src.name)
        return evaluate_subtitles(subs, siblings, input_name=src.name)

    def _integrity_task(self, src: Path, stop: threading.Event) -> List[Issue]:
        # IntegrityCheckTimeout / IntegrityCheckError propagate; a hang is not a pass.
        validation = self.validator.validate(src, self.cfg.ffmpeg.integrity_window_sec, stop)
        return evaluate_integrity(validation)
