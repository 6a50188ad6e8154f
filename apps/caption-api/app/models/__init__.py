from app.models.caption import Caption
from app.models.caption_vote import CaptionVote

__all__ = ["Caption", "CaptionVote"]
