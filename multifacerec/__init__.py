"""
Real-Time Multiple Face Detection and Recognition

This package implements a live face recognition pipeline on top of OpenCV:
- Face detection using Haar Cascade (optional eye detection)
- Gray 100x100 face crops
- Eigenface (PCA) recognition with an eigen-distance threshold
- Training set persisted as BMP crops plus a label file
"""

__version__ = "1.0.0"
