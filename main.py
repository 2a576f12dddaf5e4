import sys

def run_http(reload: bool = False):
    """Run the API server on port 5000"""
    import uvicorn
    print("🚀 Starting HTTP server on port 5000...")
    uvicorn.run(
        "hrms.main:app",  # Use string import
        host="0.0.0.0",
        port=5000,
        reload=reload
    )

if __name__ == "__main__":
    run_http(reload="--reload" in sys.argv)
