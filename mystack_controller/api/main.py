from fastapi import FastAPI
from mystack_controller.api.routes.cluster_configs import router as cluster_configs_router
from mystack_controller.api.routes.clusters import router as clusters_router

app = FastAPI(title="mystack controller API")

@app.get("/health")
def health():
    return {"status": "ok"}

app.include_router(clusters_router)
app.include_router(cluster_configs_router)
