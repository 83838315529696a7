# Mask estimation module
from .irm import compute_irm, binarize_mask, noise_from_mask, apply_mask, check_same_shape
from .postprocess import irm_post_process, regime_indicators, validate_bounds
from .gain import compute_geometric_gain, apply_geometric_gain, sigmoid_mask, sigmoid_mask_post_process
