"""
Inference Engine - runs a PyTorch detection model on prepared input.

The model's forward pass is blocking, so it runs on a worker thread and the
event loop stays free to keep ticking while the cycle is suspended.
"""

import asyncio
import logging

import numpy as np
import torch
from ultralytics import YOLO

logger = logging.getLogger(__name__)


def select_device(device: str | None = None) -> str:
    """Use the requested device, or CUDA when available."""
    if device:
        return device
    return "cuda" if torch.cuda.is_available() else "cpu"


class TorchInferenceEngine:
    """
    Executes a detection module on (1, H, W, 3) float32 input.

    The module receives NCHW input and must return the raw head output
    (1, 4 + num_classes, num_anchors), optionally as the first element of
    a tuple or list.
    """

    def __init__(
        self,
        module: torch.nn.Module | None,
        device: str | None = None,
        names: dict[int, str] | None = None,
    ):
        self.device = select_device(device)
        self.names = dict(names) if names else {}
        self._module = None
        if module is not None:
            self.load(module)

    @classmethod
    def from_weights(cls, model_file: str, device: str | None = None) -> "TorchInferenceEngine":
        """
        Load a YOLO .pt file through ultralytics and wrap its detection module.

        Args:
            model_file: Path to the weights file
            device: Target device (auto-detected when None)
        """
        yolo = YOLO(model_file)
        engine = cls(yolo.model, device=device, names=dict(yolo.names))

        logger.info(f"Model initialized: {model_file}")
        logger.info(f"Device: {engine.device}")
        if engine.device == "cuda":
            logger.info(f"GPU: {torch.cuda.get_device_name(0)}")
        else:
            logger.warning("Running on CPU - performance will be slow")

        return engine

    @property
    def is_loaded(self) -> bool:
        return self._module is not None

    def load(self, module: torch.nn.Module) -> None:
        module.eval()
        self._module = module.to(self.device)

    async def execute(self, tensor: np.ndarray) -> np.ndarray:
        if self._module is None:
            raise RuntimeError("Model not loaded")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._forward, tensor)

    def _forward(self, tensor: np.ndarray) -> np.ndarray:
        batch = torch.from_numpy(np.ascontiguousarray(tensor, dtype=np.float32))
        batch = batch.permute(0, 3, 1, 2).contiguous().to(self.device)

        with torch.inference_mode():
            output = self._module(batch)

        if isinstance(output, (tuple, list)):
            output = output[0]
        return output.detach().float().cpu().numpy()

    def release(self, buffer) -> None:
        """Drop cached device memory once a cycle's buffers are released."""
        if self.device == "cuda" and isinstance(buffer, np.ndarray) and buffer.ndim == 3:
            torch.cuda.empty_cache()

    def unload(self) -> None:
        self._module = None
        if self.device == "cuda":
            torch.cuda.empty_cache()
        logger.info("Model unloaded")
