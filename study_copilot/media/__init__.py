"""Media generation: video synthesis (long-running, polled) and images."""
from .images import ImageStudio, create_image_studio
from .video import VideoGenerator, create_video_generator

__all__ = ["ImageStudio", "VideoGenerator", "create_image_studio", "create_video_generator"]
