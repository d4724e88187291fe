"""Demo server handing out and serving signed URLs."""
