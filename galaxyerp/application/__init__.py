"""应用层：配置、接口、校验、中间件与应用装配。"""
