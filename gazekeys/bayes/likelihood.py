from __future__ import annotations
import numpy as np
from typing import Dict, Optional, Tuple
from ..keyboard.layout import Layout
from ..keyboard.geometry import KeyGeometryCache

class LikelihoodModel:
    """
    Isotropic Gaussian around each key centre. Sigma is tied to the size of a
    reference key so the tolerance follows the rendered keyboard.
    """
    def __init__(self, layout: Layout, sigma_ratio: float=0.5, special_boost: float=0.75,
                 active_expansion: float=1.5, default_sigma: float=40.0):
        self.layout = layout
        self.sigma_ratio = sigma_ratio
        self.special_boost = special_boost
        self.active_expansion = active_expansion
        self.default_sigma = default_sigma
        self.base_sigma = default_sigma

    def update_sigma(self, geometry: KeyGeometryCache) -> float:
        ref = geometry.get(self.layout.keys[0].id)
        self.base_sigma = min(ref.width, ref.height)*self.sigma_ratio if ref is not None else self.default_sigma
        if self.base_sigma <= 0: self.base_sigma = self.default_sigma
        return self.base_sigma

    def __call__(self, point: Tuple[float,float], geometry: KeyGeometryCache,
                 active_id: Optional[str]=None) -> Dict[str,float]:
        """Likelihood per key that has geometry, in layout order. ``active_id`` gets the widened sigma."""
        ids, centers, sigmas, boost = [], [], [], []
        for k in self.layout:
            rect = geometry.get(k.id)
            if rect is None: continue
            ids.append(k.id); centers.append(rect.center)
            sigmas.append(self.base_sigma*(self.active_expansion if k.id == active_id else 1.0))
            boost.append(self.special_boost if k.is_special else 1.0)
        if not ids: return {}
        d2 = ((np.asarray(centers) - np.asarray(point, dtype=float))**2).sum(-1)
        s = np.asarray(sigmas)
        lik = np.exp(-d2 / (2.0*s*s)) * np.asarray(boost)
        return dict(zip(ids, lik.tolist()))
