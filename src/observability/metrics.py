METRICS = {
    "chat_image_uploads": 0,
    "chat_image_successes": 0,
    "chat_image_failures": 0,
}

def inc(key, value=1):
    METRICS[key] = METRICS.get(key, 0) + value

def snapshot():
    return dict(METRICS)

def reset():
    for key in list(METRICS):
        METRICS[key] = 0
