"""Neural voice classifier running the Silero VAD model through ONNX Runtime."""
import numpy as np
from typing import Optional

from vadsync.audio.vad.base import VoiceClassifier
from vadsync.core.errors import ClassifierInitError, VoiceDetectionError
from vadsync.core.logging import logger

STATE_SHAPE = (2, 1, 64)
DEFAULT_THRESHOLD = 0.7


def load_vad_model(model_path: str, num_threads: int = 4) -> object:
    """
    Load the ONNX VAD model using ONNX Runtime.

    Args:
        model_path: Path to ONNX model file
        num_threads: Intra-op thread count for the session

    Returns:
        ONNX InferenceSession

    Raises:
        ClassifierInitError: if onnxruntime or the model is unavailable
    """
    try:
        import onnxruntime as ort
    except ImportError as exc:
        raise ClassifierInitError(
            "onnxruntime not installed, silero backend unavailable. Install with: pip install onnxruntime"
        ) from exc

    try:
        sess_options = ort.SessionOptions()
        sess_options.graph_optimization_level = ort.GraphOptimizationLevel.ORT_ENABLE_ALL
        sess_options.execution_mode = ort.ExecutionMode.ORT_SEQUENTIAL
        sess_options.inter_op_num_threads = 1
        sess_options.intra_op_num_threads = num_threads

        session = ort.InferenceSession(
            model_path,
            sess_options=sess_options,
            providers=['CPUExecutionProvider']
        )
    except Exception as e:
        raise ClassifierInitError(
            f"Unable to initialize voice auto detector! (model={model_path}, error={e})"
        ) from e

    logger.info("ONNX VAD model loaded successfully")
    logger.info(f"  Model path: {model_path}")
    logger.info(f"  Input names: {[inp.name for inp in session.get_inputs()]}")
    logger.info(f"  Output names: {[out.name for out in session.get_outputs()]}")
    return session


class SileroClassifier(VoiceClassifier):
    """
    Silero VAD over 96ms frames at 16kHz.

    The model is recurrent: hidden and cell state tensors are carried from one
    frame to the next for the lifetime of the instance and start from zeros.
    The model takes three inputs (samples, h, c) and returns three outputs
    (probabilities, h, c); voice probability is `output[0, 1, 0]`.
    """

    name = "silero"
    sample_rate = 16000
    chunk_duration_ms = 96

    def __init__(
        self,
        model_path: Optional[str] = None,
        threshold: float = DEFAULT_THRESHOLD,
        num_threads: int = 4,
        session: Optional[object] = None,
    ):
        if session is None:
            if not model_path:
                raise ClassifierInitError("No ONNX model path configured for silero backend")
            session = load_vad_model(model_path, num_threads)

        inputs = [inp.name for inp in session.get_inputs()]
        if len(inputs) != 3:
            raise ClassifierInitError(
                f"Silero model must take 3 inputs (samples, h, c), got {inputs}"
            )

        self.session = session
        self.threshold = threshold
        self.input_names = inputs
        self.h = np.zeros(STATE_SHAPE, dtype=np.float32)
        self.c = np.zeros(STATE_SHAPE, dtype=np.float32)

    def probability(self, frame: np.ndarray) -> float:
        """Run one inference step and advance the recurrent state."""
        # Model expects raw sample values as float32, not normalized
        samples = frame.astype(np.float32).reshape(1, self.chunk_size)
        feeds = dict(zip(self.input_names, (samples, self.h, self.c)))
        try:
            output, hn, cn = self.session.run(None, feeds)[:3]
        except Exception as e:
            raise VoiceDetectionError(
                f"The silero-vad module encountered an error while processing samples for voice activity. ({e})"
            ) from e

        self.h = np.asarray(hn, dtype=np.float32)
        self.c = np.asarray(cn, dtype=np.float32)
        return float(np.asarray(output)[0, 1, 0])

    def _classify_frame(self, frame: np.ndarray) -> bool:
        probability = self.probability(frame)
        logger.debug(f"silero probability: {probability:.3f}")
        return self.threshold <= probability
