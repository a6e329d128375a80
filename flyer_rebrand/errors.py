"""
Error kinds raised by the compositing engine.
"""


class EngineError(Exception):
	"""Base class for fatal export failures."""


class UnsupportedRotation(EngineError, ValueError):
	def __init__(self, rotation: object):
		super().__init__(f"Unsupported page rotation: {rotation!r} (expected 0, 90, 180 or 270)")
		self.rotation = rotation


class SourcePageUnreadable(EngineError):
	pass


class FontEmbedFailure(EngineError):
	pass


class ImageEmbedFailure(EngineError):
	pass


class BlockValidationError(EngineError, ValueError):
	pass


class MaskOutOfBounds(UserWarning):
	"""
	Mask setting exceeded the page and was clamped.

	Recoverable: collected into the page diagnostics, never raised.
	"""
