"""Caption engine stages and external collaborators."""
