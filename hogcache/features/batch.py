"""
Batch HOG extraction over a directory of images

Reads every image in a directory, resizes it to a fixed crop and stores the
full-crop descriptor as one row of a feature matrix.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import cv2
import numpy as np
from tqdm import tqdm

from ..exceptions import HOGError
from .config import HOGConfig
from .extractor import HOGExtractor
from .retrieval import Window

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.bmp', '.tif', '.tiff', '.pgm', '.ppm')


def list_images(input_dir: Union[str, Path]) -> List[Path]:
    """
    List image files in a directory (non-recursive, sorted by name)

    Raises:
        FileNotFoundError: If the directory does not exist
    """
    input_dir = Path(input_dir)
    if not input_dir.is_dir():
        raise FileNotFoundError(f"Input directory not found: {input_dir}")

    return sorted(
        p for p in input_dir.iterdir()
        if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS
    )


def load_image(image_path: Union[str, Path],
               crop_size: Optional[Tuple[int, int]] = None) -> np.ndarray:
    """
    Load an image unchanged and optionally resize it

    Args:
        image_path: Path to image file
        crop_size: Target (width, height), or None to keep the original size

    Raises:
        ValueError: If the image cannot be decoded
    """
    img = cv2.imread(str(image_path), cv2.IMREAD_UNCHANGED)
    if img is None:
        raise ValueError(f"Failed to load image: {image_path}")

    if crop_size is not None:
        h, w = img.shape[:2]
        if (w, h) != tuple(crop_size):
            img = cv2.resize(img, tuple(crop_size), interpolation=cv2.INTER_LINEAR)

    return img


def extract_directory(input_dir: Union[str, Path],
                      config: HOGConfig,
                      crop_size: Tuple[int, int] = (128, 256),
                      n_jobs: int = 1,
                      show_progress: bool = True) -> Tuple[List[str], np.ndarray, List[Dict]]:
    """
    Extract one HOG descriptor per image of a directory

    Args:
        input_dir: Directory containing images
        config: Extractor configuration
        crop_size: (width, height) every image is resized to
        n_jobs: Worker threads for the cell grid of each image
        show_progress: Show a tqdm progress bar

    Returns:
        Tuple of (filenames, features, results):
        - filenames: names of the successfully described images
        - features: (len(filenames), descriptor_size) float32 matrix
        - results: one status dict per listed file (including failures)
    """
    hog = HOGExtractor(config=config, n_jobs=n_jobs)
    crop_width, crop_height = crop_size
    hog_size = hog.descriptor_size(crop_width, crop_height)
    window = Window(0, 0, crop_width, crop_height)

    image_files = list_images(input_dir)
    logger.info(f"Found {len(image_files)} images in {input_dir}")
    logger.info(f"Descriptor size for {crop_width}x{crop_height} crops: {hog_size}")

    filenames = []
    rows = []
    results = []

    iterator = tqdm(image_files, desc='HOG') if show_progress else image_files
    for img_path in iterator:
        try:
            image = load_image(img_path, crop_size)
            hog.process(image)
            hist = hog.retrieve(window)

            if hist.size != hog_size:
                raise HOGError(f"descriptor size {hist.size} != expected {hog_size}")

            filenames.append(img_path.name)
            rows.append(hist)
            results.append({
                'filename': img_path.name,
                'filepath': str(img_path),
                'descriptor_size': int(hist.size),
                'status': 'ok',
            })
        except (ValueError, HOGError, cv2.error) as e:
            logger.warning(f"Error processing {img_path.name}: {e}")
            results.append({
                'filename': img_path.name,
                'filepath': str(img_path),
                'descriptor_size': 0,
                'status': 'error',
                'error': str(e),
            })

    if rows:
        features = np.stack(rows).astype(np.float32, copy=False)
    else:
        features = np.empty((0, hog_size), dtype=np.float32)

    logger.info(f"Described {len(filenames)}/{len(image_files)} images")
    return filenames, features, results


def save_features(output_path: Union[str, Path],
                  filenames: List[str],
                  features: np.ndarray,
                  config: Optional[HOGConfig] = None) -> Path:
    """
    Save filenames and the feature matrix to a compressed .npz file

    Returns:
        Path of the written file
    """
    output_path = Path(output_path)
    if output_path.suffix != '.npz':
        output_path = output_path.with_suffix('.npz')
    output_path.parent.mkdir(parents=True, exist_ok=True)

    arrays = {
        'filenames': np.array(filenames, dtype=str),
        'hog_features': features,
    }
    if config is not None:
        arrays.update({f'config_{k}': np.array(v) for k, v in config.to_dict().items()})

    np.savez_compressed(output_path, **arrays)
    logger.info(f"Saved {features.shape[0]} descriptors to {output_path}")
    return output_path


def load_features(path: Union[str, Path]) -> Tuple[List[str], np.ndarray]:
    """Load (filenames, features) written by save_features()"""
    with np.load(Path(path)) as data:
        return [str(f) for f in data['filenames']], data['hog_features']
