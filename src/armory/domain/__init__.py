"""Domain layer: catalog model, tag vocabulary and the merge engine."""
