from gatehouse.schemas.package.package import PackageCreate, PackageResponse

__all__ = ["PackageCreate", "PackageResponse"]
