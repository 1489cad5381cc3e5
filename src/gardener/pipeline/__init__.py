"""
Pipeline module for weeding-list augmentation.

Provides the per-record catalog query loop, row augmentation, output path
naming, the single-file worker and the multi-file run controller.
"""
