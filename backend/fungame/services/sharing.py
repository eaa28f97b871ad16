import time
from datetime import datetime, timezone

SHARE_PLATFORMS = ('twitter', 'facebook')


def share_to_social_media(platform, score, delay_ms=100):
    """Mocked share: waits `delay_ms` then returns a canned success payload.

    No request leaves the server; the payload matches what a real
    Twitter/Facebook integration would hand back to the client.
    """
    message = f"I just scored {score} points in Fun-Game! Can you beat my score? 🎮"
    if delay_ms > 0:
        time.sleep(delay_ms / 1000.0)
    return {
        'success': True,
        'platform': platform,
        'message': message,
        'share_url': f"https://{platform}.com/mock-share-url",
        'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
    }
