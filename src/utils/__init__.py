from src.utils.image_utils import image_bytes_to_base64, resize_image_if_needed, split_data_url

__all__ = [
    "image_bytes_to_base64",
    "resize_image_if_needed",
    "split_data_url",
]
