def default(app, *args):
    # 같은 app 에 먼저 들어간 모델을 사용
    def handle():
        return app["model"]["module2"]() if "model" in app else []
    return handle
